import pytest


def project_body(**overrides):
    body = {
        "title": "Campus Navigator",
        "description": "Indoor maps for every building on campus",
        "skills": ["Python", "React"],
    }
    body.update(overrides)
    return body


@pytest.fixture
def project(client, student):
    response = client.post("/projects", json=project_body(), headers=student["headers"])
    assert response.status_code == 201, response.text
    return response.json()


def test_creator_is_the_only_leader(client, student, project):
    assert project["status"] == "OPEN"
    assert len(project["members"]) == 1
    leader = project["members"][0]
    assert leader["userId"] == student["id"]
    assert leader["role"] == "leader"


def test_create_requires_skills_list(client, student):
    response = client.post("/projects", json=project_body(skills="python"), headers=student["headers"])
    assert response.status_code == 400


def test_join(client, other_student, project):
    response = client.post(f"/projects/{project['id']}/join", headers=other_student["headers"])
    assert response.status_code == 200

    members = client.get(f"/projects/{project['id']}", headers=other_student["headers"]).json()["members"]
    roles = {m["userId"]: m["role"] for m in members}
    assert roles[other_student["id"]] == "member"

    again = client.post(f"/projects/{project['id']}/join", headers=other_student["headers"])
    assert again.status_code == 409
    assert again.json()["message"] == "Already a member of this project"


def test_leader_cannot_join_twice(client, student, project):
    assert client.post(f"/projects/{project['id']}/join", headers=student["headers"]).status_code == 409


def test_join_closed_or_missing_project(client, student, other_student, project):
    client.put(f"/projects/{project['id']}", json={"status": "IN_PROGRESS"}, headers=student["headers"])

    closed = client.post(f"/projects/{project['id']}/join", headers=other_student["headers"])
    assert closed.status_code == 400
    assert closed.json()["message"] == "Project is not open for new members"

    missing = client.post("/projects/missing/join", headers=other_student["headers"])
    assert missing.status_code == 404


def test_list_filters(client, student):
    client.post("/projects", json=project_body(title="Robot Arm", skills=["C++", "ROS"]), headers=student["headers"])
    client.post("/projects", json=project_body(title="Data Viz", skills=["python", "d3"]), headers=student["headers"])
    client.post("/projects", json=project_body(title="Pythonic Poems", skills=["writing"]), headers=student["headers"])

    by_skill = client.get("/projects", params={"skills": "python,ros"}, headers=student["headers"]).json()
    assert sorted(p["title"] for p in by_skill["data"]) == ["Data Viz", "Robot Arm"]

    by_search = client.get("/projects", params={"search": "robot"}, headers=student["headers"]).json()
    assert by_search["pagination"]["total"] == 1
    assert by_search["data"][0]["members"][0]["role"] == "leader"

    by_status = client.get("/projects", params={"status": "COMPLETED"}, headers=student["headers"]).json()
    assert by_status["data"] == []


def test_update_and_delete_permissions(client, student, other_student, admin, project):
    assert client.put(
        f"/projects/{project['id']}", json={"title": "Mine now"}, headers=other_student["headers"]
    ).status_code == 403

    updated = client.put(
        f"/projects/{project['id']}", json={"skills": ["Go"], "status": "COMPLETED"}, headers=admin["headers"]
    )
    assert updated.status_code == 200
    assert updated.json()["skills"] == ["Go"]
    assert updated.json()["status"] == "COMPLETED"

    assert client.delete(f"/projects/{project['id']}", headers=other_student["headers"]).status_code == 403
    assert client.delete(f"/projects/{project['id']}", headers=student["headers"]).status_code == 200
    assert client.get(f"/projects/{project['id']}", headers=student["headers"]).status_code == 404


def test_skill_filter_matches_non_ascii_and_literal_skills(client, student):
    client.post("/projects", json=project_body(title="Traductor", skills=["Español", "NLP"]), headers=student["headers"])
    client.post("/projects", json=project_body(title="Game Jam", skills=["c_sharp"]), headers=student["headers"])
    client.post("/projects", json=project_body(title="Compiler", skills=["cxsharp"]), headers=student["headers"])

    spanish = client.get("/projects", params={"skills": "Español"}, headers=student["headers"]).json()
    assert [p["title"] for p in spanish["data"]] == ["Traductor"]
    assert spanish["data"][0]["skills"] == ["Español", "NLP"]

    underscore = client.get("/projects", params={"skills": "c_sharp"}, headers=student["headers"]).json()
    assert [p["title"] for p in underscore["data"]] == ["Game Jam"]
