"""
Smoke tests for the SQLRepository against a temporary SQLite database.
"""
from __future__ import annotations

import pytest

from accounts.core.errors import BadRequestError
from accounts.domain.query import UserQuery
from accounts.repositories.sql_repository import DuplicateEmailError


def _query(**params):
    return UserQuery.from_params(params).filter().sort().limit_fields().paginate()


def test_create_and_lookup_user(repo):
    user = repo.create_user("Alice@Example.com", "hash", name="Alice")

    assert len(user.id) == 32
    assert user.email == "alice@example.com"
    assert user.role == "user"
    assert user.active is True
    assert repo.get_user(user.id).name == "Alice"
    assert repo.get_user_by_email("ALICE@example.com ").id == user.id


def test_duplicate_email_is_rejected(repo):
    repo.create_user("dup@example.com", "hash")
    with pytest.raises(DuplicateEmailError):
        repo.create_user("dup@example.com", "hash")


def test_partial_update_only_touches_given_fields(repo):
    user = repo.create_user("bob@example.com", "hash", name="Bob")
    updated = repo.update_user(user.id, {"role": "guide"})

    assert updated.role == "guide"
    assert updated.name == "Bob"
    assert updated.email == "bob@example.com"
    assert repo.update_user("missing", {"role": "guide"}) is None


def test_deactivated_user_is_invisible(repo):
    user = repo.create_user("gone@example.com", "hash")
    repo.deactivate_user(user.id)

    assert repo.get_user(user.id) is None
    assert repo.get_user_by_email("gone@example.com") is None
    assert repo.list_users(_query()) == []


def test_delete_user(repo):
    user = repo.create_user("del@example.com", "hash")
    assert repo.delete_user(user.id) is True
    assert repo.get_user(user.id) is None
    assert repo.delete_user(user.id) is False


def test_list_users_filters_sorts_and_projects(repo):
    for name, email in (("Carol", "c@example.com"), ("Alice", "a@example.com"), ("Bob", "b@example.com")):
        repo.create_user(email, "hash", name=name)
    admin = repo.create_user("root@example.com", "hash", name="Root")
    repo.update_user(admin.id, {"role": "admin"})

    rows = repo.list_users(_query(role="user", sort="name", fields="name"))

    assert [row["name"] for row in rows] == ["Alice", "Bob", "Carol"]
    assert set(rows[0]) == {"id", "name"}


def test_list_users_paginates(repo):
    for idx in range(5):
        repo.create_user(f"u{idx}@example.com", "hash", name=f"user{idx}")

    page = repo.list_users(_query(sort="name", limit="2", page="2"))
    assert [row["name"] for row in page] == ["user2", "user3"]


def test_list_users_never_returns_password(repo):
    repo.create_user("p@example.com", "secret-hash")
    rows = repo.list_users(_query())
    assert "password_hash" not in rows[0]


def test_list_users_coerces_boolean_and_rejects_bad_dates(repo):
    repo.create_user("x@example.com", "hash")
    assert len(repo.list_users(_query(active="true"))) == 1
    with pytest.raises(BadRequestError):
        repo.list_users(UserQuery.from_params({"created_at[gte]": "yesterday"}).filter())


def test_reset_token_lifecycle(repo):
    user = repo.create_user("r@example.com", "hash")
    repo.create_reset_token(user.id, "d" * 64)

    assert repo.get_reset_token("d" * 64).user_id == user.id
    repo.delete_reset_tokens_for_user(user.id)
    assert repo.get_reset_token("d" * 64) is None
