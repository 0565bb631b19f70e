import re
from datetime import datetime, timedelta

from sqlalchemy import select

from conftest import register
from yelpcamp.core.security import verify_password
from yelpcamp.db.models import User


def _user(db, username="alice"):
    db.expire_all()
    return db.scalars(select(User).where(User.username == username)).one()


def _request_reset(client, email="alice@example.com"):
    return client.post("/forgot", data={"email": email}, follow_redirects=False)


def test_forgot_unknown_email(client, db, mailer):
    register(client, "alice")
    resp = _request_reset(client, "nobody@example.com")
    assert resp.status_code == 200
    assert "No account with that email exists." in resp.text
    assert mailer.sent == []
    assert _user(db).reset_password_token is None


def test_forgot_sets_token_and_mails_link(make_client, db, mailer):
    register(make_client(), "alice")
    c = make_client()
    resp = _request_reset(c)
    assert resp.headers["location"] == "/forgot"

    user = _user(db)
    assert re.fullmatch(r"[0-9a-f]{40}", user.reset_password_token)
    assert user.reset_password_expires > datetime.utcnow()
    assert user.reset_password_expires <= datetime.utcnow() + timedelta(hours=1)

    assert len(mailer.sent) == 1
    to, _, body = mailer.sent[0]
    assert to == "alice@example.com"
    assert f"http://testserver/reset/{user.reset_password_token}" in body
    assert "An email has been sent to alice@example.com" in c.get("/forgot").text


def test_forgot_mail_failure_is_flashed(make_client, mailer):
    register(make_client(), "alice")
    mailer.fail = "relay refused"
    c = make_client()
    resp = _request_reset(c)
    assert resp.headers["location"] == "/forgot"
    assert "relay refused" in c.get("/forgot").text


def test_reset_form_with_bad_token(client):
    resp = client.get("/reset/deadbeef", follow_redirects=False)
    assert resp.headers["location"] == "/forgot"
    assert "Password reset token is invalid or has expired." in client.get("/forgot").text


def test_reset_form_with_valid_token(make_client, db):
    register(make_client(), "alice")
    c = make_client()
    _request_reset(c)
    token = _user(db).reset_password_token
    assert c.get(f"/reset/{token}").status_code == 200


def test_expired_token_is_rejected(make_client, db):
    register(make_client(), "alice")
    c = make_client()
    _request_reset(c)
    user = _user(db)
    token = user.reset_password_token
    user.reset_password_expires = datetime.utcnow() - timedelta(seconds=1)
    db.commit()

    assert c.get(f"/reset/{token}", follow_redirects=False).headers["location"] == "/forgot"
    c.post(f"/reset/{token}", data={"password": "new", "confirm": "new"})
    assert verify_password("secret", _user(db).password_hash)


def test_mismatched_passwords_change_nothing(make_client, db, mailer):
    register(make_client(), "alice")
    c = make_client()
    _request_reset(c)
    token = _user(db).reset_password_token
    resp = c.post(
        f"/reset/{token}",
        data={"password": "one", "confirm": "two"},
        headers={"referer": f"http://testserver/reset/{token}"},
        follow_redirects=False,
    )
    assert resp.headers["location"] == f"http://testserver/reset/{token}"
    user = _user(db)
    assert verify_password("secret", user.password_hash)
    assert user.reset_password_token == token
    assert len(mailer.sent) == 1


def test_reset_password(make_client, db, mailer):
    register(make_client(), "alice")
    c = make_client()
    _request_reset(c)
    token = _user(db).reset_password_token

    resp = c.post(f"/reset/{token}", data={"password": "fresh", "confirm": "fresh"}, follow_redirects=False)
    assert resp.headers["location"] == "/campgrounds"

    user = _user(db)
    assert verify_password("fresh", user.password_hash)
    assert user.reset_password_token is None
    assert user.reset_password_expires is None

    assert len(mailer.sent) == 2
    assert mailer.sent[1][1] == "Your password has been changed"

    page = c.get("/campgrounds")
    assert "Success! Your password has been changed." in page.text
    assert "Signed in as alice" in page.text


def test_forgot_keeps_pending_flash_with_inline_error(make_client):
    register(make_client(), "alice", password="right")
    c = make_client()
    c.post("/login", data={"username": "alice", "password": "wrong"}, follow_redirects=False)
    resp = _request_reset(c, "nobody@example.com")
    assert "Password or username is incorrect" in resp.text
    assert "No account with that email exists." in resp.text
