"""Counters are bumped in the database, so concurrent requests never lose an increment."""
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlmodel import Session

from campusconnect.models import Discussion, Resource, Role, User
from campusconnect.services import discussions, resources

WORKERS = 8
CALLS = 40


@pytest.fixture
def author(file_engine):
    with Session(file_engine) as session:
        user = User(name="Writer", email="writer@campus.edu", password_hash="x", role=Role.STUDENT,
                    department="CS", is_verified=True)
        session.add(user)
        session.commit()
        return user.id


def hammer(engine, fn, target_id):
    def one_call(_):
        with Session(engine) as session:
            return fn(session, target_id)

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        return list(pool.map(one_call, range(CALLS)))


def test_concurrent_upvotes(file_engine, author):
    with Session(file_engine) as session:
        discussion = Discussion(title="Busy", content="Very popular thread", department="CS", author_id=author)
        session.add(discussion)
        session.commit()
        discussion_id = discussion.id

    results = hammer(file_engine, discussions.upvote, discussion_id)

    assert sorted(results) == list(range(1, CALLS + 1))
    with Session(file_engine) as session:
        assert session.get(Discussion, discussion_id).upvotes == CALLS


def test_concurrent_downloads(file_engine, author):
    with Session(file_engine) as session:
        resource = Resource(title="Notes", description="Shared lecture notes", subject="Math",
                            file_url="https://cdn.campus.test/n.pdf", file_type="application/pdf",
                            uploaded_by_id=author)
        session.add(resource)
        session.commit()
        resource_id = resource.id

    results = hammer(file_engine, resources.record_download, resource_id)

    assert sorted(count for _, count in results) == list(range(1, CALLS + 1))
    with Session(file_engine) as session:
        assert session.get(Resource, resource_id).downloads == CALLS
