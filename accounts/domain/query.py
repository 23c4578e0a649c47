"""Query-string driven filtering, sorting, projection and pagination.

``UserQuery`` is immutable: every step returns a new value, and the
repository turns the final value into a SQL statement.

    query = UserQuery.from_params(request.query_params).filter().sort().limit_fields().paginate()
"""
from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Iterable, Mapping

from accounts.core.errors import BadRequestError

RESERVED_PARAMS = frozenset({"page", "sort", "limit", "fields"})
QUERYABLE_FIELDS = (
    "id",
    "name",
    "email",
    "role",
    "active",
    "password_changed_at",
    "created_at",
    "updated_at",
)
DEFAULT_SORT = "-created_at"
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 100
MAX_LIMIT = 1000
MAX_OFFSET = 2**63 - 1

_OPERATOR_KEY = re.compile(r"^(?P<field>\w+)\[(?P<op>gte|gt|lte|lt)\]$")


@dataclass(frozen=True)
class Condition:
    field: str
    op: str
    value: str


@dataclass(frozen=True)
class Ordering:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class UserQuery:
    params: tuple[tuple[str, str], ...] = ()
    conditions: tuple[Condition, ...] = ()
    ordering: tuple[Ordering, ...] = ()
    fields: tuple[str, ...] = ()
    excluded: tuple[str, ...] = ()
    offset: int = 0
    limit: int | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, str] | Iterable[tuple[str, str]]) -> "UserQuery":
        items = params.items() if isinstance(params, Mapping) else params
        return cls(params=tuple((str(k), str(v)) for k, v in items))

    def _param(self, name: str) -> str | None:
        for key, value in self.params:
            if key == name:
                return value
        return None

    def filter(self) -> "UserQuery":
        conditions = []
        for key, value in self.params:
            if key in RESERVED_PARAMS:
                continue
            match = _OPERATOR_KEY.match(key)
            field, op = (match.group("field"), match.group("op")) if match else (key, "eq")
            if field not in QUERYABLE_FIELDS:
                continue
            conditions.append(Condition(field, op, value))
        return replace(self, conditions=self.conditions + tuple(conditions))

    def sort(self) -> "UserQuery":
        raw = self._param("sort") or DEFAULT_SORT
        ordering = []
        for token in raw.split(","):
            token = token.strip()
            if not token:
                continue
            descending = token.startswith("-")
            field = token.lstrip("-+")
            if field in QUERYABLE_FIELDS:
                ordering.append(Ordering(field, descending))
        if not ordering:
            ordering.append(Ordering("created_at", True))
        return replace(self, ordering=tuple(ordering))

    def limit_fields(self) -> "UserQuery":
        raw = self._param("fields")
        if not raw:
            return replace(self, fields=(), excluded=())
        names = [name.strip() for name in raw.split(",") if name.strip()]
        excluded = tuple(n[1:] for n in names if n.startswith("-") and n[1:] in QUERYABLE_FIELDS and n[1:] != "id")
        included = [n for n in names if not n.startswith("-") and n in QUERYABLE_FIELDS]
        if included:
            fields = ("id",) + tuple(n for n in dict.fromkeys(included) if n != "id")
            return replace(self, fields=fields, excluded=())
        return replace(self, fields=(), excluded=excluded)

    def paginate(self) -> "UserQuery":
        page = _positive_int(self._param("page"), DEFAULT_PAGE, "page")
        limit = min(_positive_int(self._param("limit"), DEFAULT_LIMIT, "limit"), MAX_LIMIT)
        offset = (page - 1) * limit
        if offset > MAX_OFFSET:
            raise BadRequestError(f"Invalid page: {page}")
        return replace(self, offset=offset, limit=limit)

    def selected_fields(self) -> tuple[str, ...]:
        if self.fields:
            return self.fields
        return tuple(f for f in QUERYABLE_FIELDS if f not in self.excluded)


def _positive_int(raw: str | None, default: int, name: str) -> int:
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise BadRequestError(f"Invalid {name}: {raw!r}")
    if value < 1:
        raise BadRequestError(f"Invalid {name}: {raw!r}")
    return value
