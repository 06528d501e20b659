import math

import pytest

from campusconnect.pagination import Page


@pytest.mark.parametrize("total, limit", [(0, 10), (1, 10), (10, 10), (11, 10), (49, 50), (50, 50), (51, 50), (7, 3)])
def test_pages_is_ceiling(total, limit):
    page = Page(items=[], total=total, page=1, limit=limit)
    assert page.pages == math.ceil(total / limit)


def test_to_dict_shape():
    page = Page(items=[1, 2], total=5, page=2, limit=2)

    assert page.to_dict(lambda n: {"n": n}) == {
        "data": [{"n": 1}, {"n": 2}],
        "pagination": {"page": 2, "limit": 2, "total": 5, "pages": 3},
    }


def test_discussion_pages(client, student):
    for i in range(53):
        client.post(
            "/discussions",
            json={"title": f"Topic {i:02d}", "content": "Some content long enough", "department": "CS"},
            headers=student["headers"],
        )

    full = client.get("/discussions", params={"limit": 50}, headers=student["headers"]).json()
    assert len(full["data"]) == 50
    assert full["pagination"] == {"page": 1, "limit": 50, "total": 53, "pages": 2}

    rest = client.get("/discussions", params={"limit": 50, "page": 2}, headers=student["headers"]).json()
    assert len(rest["data"]) == 3

    default = client.get("/discussions", headers=student["headers"]).json()
    assert default["pagination"]["limit"] == 10
    assert len(default["data"]) == 10


@pytest.mark.parametrize("params", [{"limit": 51}, {"limit": 0}, {"page": 0}])
def test_out_of_range_paging_is_rejected(client, student, params):
    response = client.get("/events", params=params, headers=student["headers"])

    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"
