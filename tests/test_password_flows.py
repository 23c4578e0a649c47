"""Self-service routes: forgot/reset/update password, updateMe and deleteMe."""
from __future__ import annotations

import pytest

import accounts.services.auth_service as auth_service

USERS = "/api/v1/users"


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def outbox(monkeypatch) -> list:
    sent: list = []
    monkeypatch.setattr(auth_service, "send_email", lambda *args, **kw: sent.append(args) or True)
    return sent


def test_forgot_password_response_does_not_reveal_registration(client, signup, outbox):
    signup("a@x.com")

    known = client.post(f"{USERS}/forgotPassword", json={"email": "a@x.com"})
    unknown = client.post(f"{USERS}/forgotPassword", json={"email": "nobody@x.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()
    assert len(outbox) == 1


def test_forgot_password_requires_email(client):
    assert client.post(f"{USERS}/forgotPassword", json={}).status_code == 400


def test_reset_password_flow(client, signup, outbox):
    signup("a@x.com", "secret123")
    client.post(f"{USERS}/forgotPassword", json={"email": "a@x.com"})
    reset_token = outbox[0][3].rsplit("/", 1)[-1]

    resp = client.patch(
        f"{USERS}/resetPassword/{reset_token}",
        json={"password": "fresh-pass-1", "passwordConfirm": "fresh-pass-1"},
    )

    assert resp.status_code == 200
    assert resp.json()["token"]
    assert client.post(f"{USERS}/login", json={"email": "a@x.com", "password": "fresh-pass-1"}).status_code == 200
    assert client.post(f"{USERS}/login", json={"email": "a@x.com", "password": "secret123"}).status_code == 400

    reused = client.patch(
        f"{USERS}/resetPassword/{reset_token}",
        json={"password": "other-pass-1", "passwordConfirm": "other-pass-1"},
    )
    assert reused.status_code == 400
    assert reused.json()["message"] == "Token is invalid or has expired"


def test_reset_password_requires_matching_confirmation(client, signup, outbox):
    signup("a@x.com")
    client.post(f"{USERS}/forgotPassword", json={"email": "a@x.com"})
    reset_token = outbox[0][3].rsplit("/", 1)[-1]

    resp = client.patch(
        f"{USERS}/resetPassword/{reset_token}",
        json={"password": "fresh-pass-1", "passwordConfirm": "fresh-pass-2"},
    )
    assert resp.status_code == 400


def test_update_password(client, signup):
    token = signup("a@x.com", "secret123")["token"]

    wrong = client.patch(
        f"{USERS}/updatePassword",
        headers=_bearer(token),
        json={"passwordCurrent": "nope-nope", "password": "fresh-pass-1", "passwordConfirm": "fresh-pass-1"},
    )
    assert wrong.status_code == 401
    assert wrong.json()["message"] == "Your current password is wrong."

    ok = client.patch(
        f"{USERS}/updatePassword",
        headers=_bearer(token),
        json={"passwordCurrent": "secret123", "password": "fresh-pass-1", "passwordConfirm": "fresh-pass-1"},
    )
    assert ok.status_code == 200
    assert ok.json()["token"]
    assert client.post(f"{USERS}/login", json={"email": "a@x.com", "password": "fresh-pass-1"}).status_code == 200


def test_update_me_changes_profile_but_not_password(client, signup):
    token = signup("a@x.com", name="Alice")["token"]

    rejected = client.patch(f"{USERS}/updateMe", headers=_bearer(token), json={"password": "hijacked1"})
    assert rejected.status_code == 400
    assert rejected.json()["message"] == "This route is not for password updates. Please use /updatePassword."

    resp = client.patch(f"{USERS}/updateMe", headers=_bearer(token), json={"name": "Alicia"})
    assert resp.status_code == 200
    user = resp.json()["data"]["user"]
    assert user["name"] == "Alicia"
    assert user["email"] == "a@x.com"
    assert user["role"] == "user"


def test_update_me_requires_login(client):
    assert client.patch(f"{USERS}/updateMe", json={"name": "x"}).status_code == 401


def test_delete_me_deactivates_account(client, signup, admin_headers):
    body = signup("a@x.com", "secret123")
    user_id = body["data"]["user"]["id"]

    resp = client.patch(f"{USERS}/deleteMe", headers=_bearer(body["token"]))

    assert resp.status_code == 204
    assert client.post(f"{USERS}/login", json={"email": "a@x.com", "password": "secret123"}).status_code == 400
    assert client.get(f"{USERS}/{user_id}", headers=admin_headers).status_code == 404
    assert client.patch(f"{USERS}/updateMe", headers=_bearer(body["token"]), json={"name": "x"}).status_code == 401
