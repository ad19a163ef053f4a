"""Resources and owners as returned by the hosting platform's API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


def _lookup(data: Mapping[str, Any], name: str) -> Any:
    """Return a key's value, matching exactly first, then ignoring case."""
    if name in data:
        return data[name]
    lowered = name.lower()
    return next(
        (v for k, v in data.items() if isinstance(k, str) and k.lower() == lowered),
        None,
    )


def _fields(data: Any, what: str, *names: str) -> dict[str, Any]:
    """Pull the named string fields out of a decoded JSON object."""
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ValueError(f"cannot decode {type(data).__name__} into {what}")
    values = {}
    for name in names:
        value = _lookup(data, name)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"cannot decode {type(value).__name__} into {what}.{name}")
        values[name] = value or ""
    values["_raw"] = data
    return values


@dataclass(frozen=True)
class Owner:
    """A user or team that owns resources."""

    id: str = ""
    name: str = ""
    email: str = ""

    @classmethod
    def from_json(cls, data: Any) -> "Owner":
        f = _fields(data, "Owner", "id", "name", "email")
        return cls(f["id"], f["name"], f["email"])


@dataclass(frozen=True)
class Service:
    """A deployed service."""

    id: str = ""
    name: str = ""
    owner: str = ""

    @classmethod
    def from_json(cls, data: Any) -> "Service":
        f = _fields(data, "Service", "id", "name", "owner")
        return cls(f["id"], f["name"], f["owner"])


@dataclass(frozen=True)
class Postgres:
    """A managed Postgres database."""

    id: str = ""
    name: str = ""
    owner: Owner = field(default_factory=Owner)

    @classmethod
    def from_json(cls, data: Any) -> "Postgres":
        f = _fields(data, "Postgres", "id", "name")
        return cls(f["id"], f["name"], Owner.from_json(_lookup(f["_raw"], "owner")))


@dataclass(frozen=True)
class Redis:
    """A managed Redis instance."""

    id: str = ""
    name: str = ""
    owner: Owner = field(default_factory=Owner)

    @classmethod
    def from_json(cls, data: Any) -> "Redis":
        f = _fields(data, "Redis", "id", "name")
        return cls(f["id"], f["name"], Owner.from_json(_lookup(f["_raw"], "owner")))