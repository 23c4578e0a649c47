from __future__ import annotations

import pytest

from accounts.core.errors import BadRequestError
from accounts.domain.query import MAX_LIMIT, Condition, Ordering, UserQuery


def test_each_step_returns_a_new_query():
    base = UserQuery.from_params({"role": "admin", "sort": "name"})
    filtered = base.filter()

    assert base.conditions == ()
    assert filtered.conditions == (Condition("role", "eq", "admin"),)
    assert filtered is not base


def test_filter_parses_operators_and_skips_reserved_and_unknown_params():
    query = UserQuery.from_params(
        [("created_at[gte]", "2024-01-01"), ("page", "2"), ("password_hash", "x"), ("nope", "1")]
    ).filter()

    assert query.conditions == (Condition("created_at", "gte", "2024-01-01"),)


def test_sort_defaults_to_newest_first():
    assert UserQuery().sort().ordering == (Ordering("created_at", True),)


def test_sort_accepts_multiple_fields():
    query = UserQuery.from_params({"sort": "-role,name"}).sort()
    assert query.ordering == (Ordering("role", True), Ordering("name", False))


def test_limit_fields_always_keeps_id_and_never_exposes_password():
    query = UserQuery.from_params({"fields": "email,password_hash,name"}).limit_fields()
    assert query.selected_fields() == ("id", "email", "name")


def test_limit_fields_exclusion():
    query = UserQuery.from_params({"fields": "-updated_at,-active"}).limit_fields()
    selected = query.selected_fields()
    assert "updated_at" not in selected
    assert "active" not in selected
    assert "email" in selected


def test_paginate_computes_offset():
    query = UserQuery.from_params({"page": "3", "limit": "10"}).paginate()
    assert (query.offset, query.limit) == (20, 10)


def test_paginate_defaults():
    query = UserQuery().paginate()
    assert (query.offset, query.limit) == (0, 100)


@pytest.mark.parametrize("params", [{"page": "0"}, {"limit": "abc"}, {"page": "-1"}])
def test_paginate_rejects_bad_numbers(params):
    with pytest.raises(BadRequestError):
        UserQuery.from_params(params).paginate()


def test_paginate_clamps_oversized_limit():
    query = UserQuery.from_params({"limit": str(10**30)}).paginate()
    assert (query.offset, query.limit) == (0, MAX_LIMIT)


def test_paginate_rejects_offset_beyond_database_range():
    with pytest.raises(BadRequestError):
        UserQuery.from_params({"page": str(10**20)}).paginate()
