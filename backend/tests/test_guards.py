import pytest

from yelpcamp.api.deps import can_edit
from yelpcamp.db.models import Campground, Comment, User


def _user(uid, admin=False):
    return User(id=uid, username=f"u{uid}", email=f"u{uid}@x", password_hash="x", is_admin=admin)


@pytest.mark.parametrize("record_cls", [Campground, Comment])
@pytest.mark.parametrize(
    "author_id, user_id, admin, expected",
    [
        (1, 1, False, True),
        (1, 2, False, False),
        (1, 2, True, True),
        (1, 1, True, True),
    ],
)
def test_can_edit_is_owner_or_admin(record_cls, author_id, user_id, admin, expected):
    record = record_cls(author_id=author_id, author_username="owner")
    assert can_edit(_user(user_id, admin), record) is expected


def test_can_edit_anonymous():
    assert can_edit(None, Campground(author_id=1, author_username="owner")) is False


def test_new_campground_requires_login(client):
    resp = client.get("/campgrounds/new", follow_redirects=False)
    assert resp.status_code == 302
    assert resp.headers["location"] == "/login"
    assert "You need to be logged in to do that." in client.get("/login").text


def test_create_campground_requires_login(client, db):
    resp = client.post("/campgrounds", data={"name": "x"}, follow_redirects=False)
    assert resp.headers["location"] == "/login"
    assert db.query(Campground).count() == 0


def test_edit_guard_anonymous_goes_back(client):
    resp = client.get(
        "/campgrounds/1/edit",
        headers={"referer": "http://testserver/campgrounds/1"},
        follow_redirects=False,
    )
    assert resp.headers["location"] == "http://testserver/campgrounds/1"


def test_edit_guard_missing_campground(login_as):
    c = login_as("alice")
    resp = c.get("/campgrounds/999/edit", follow_redirects=False)
    assert resp.status_code == 302
    assert resp.headers["location"] == "/"
    assert "Campground not found." in c.get("/").text
