"""Identity records and the persisted synchronization state."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import MISSING, dataclass, field, fields
from typing import Any


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class _Record:
    """Camel-case JSON conversion driven by the dataclass fields.

    ``_nested`` maps a field name to the record type it holds, alone or in a list.
    """

    _nested: dict[str, type[_Record]] = {}

    def _to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):  # type: ignore[arg-type]
            value = getattr(self, f.name)
            if isinstance(value, list):
                value = [item._to_dict() for item in value]
            elif isinstance(value, _Record):
                value = value._to_dict()
            out[_camel(f.name)] = value
        return out

    @classmethod
    def _from_dict(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            raise TypeError(f"{cls.__name__}: expected a JSON object, got {type(data).__name__}")
        kwargs: dict[str, Any] = {}
        for f in fields(cls):  # type: ignore[arg-type]
            key = _camel(f.name)
            value = data.get(key)
            if value is None:
                continue
            nested = cls._nested.get(f.name)
            if nested is not None and f.default_factory is list:
                if not isinstance(value, list):
                    raise TypeError(f"{key}: expected an array, got {type(value).__name__}")
                value = [nested._from_dict(item) for item in value]
            elif nested is not None:
                value = nested._from_dict(value)
            else:
                # scalar fields: the default tells the type; a None default is a count
                expected = int if f.default is None or f.default is MISSING else type(f.default)
                if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                    raise TypeError(
                        f"{key}: expected {expected.__name__}, got {type(value).__name__}"
                    )
            kwargs[f.name] = value
        return cls(**kwargs)


class _Counted(_Record):
    """A collection whose ``items`` defaults to the number of its resources."""

    def __post_init__(self) -> None:
        if self.items is None:  # type: ignore[attr-defined]
            self.items = len(self.resources)  # type: ignore[attr-defined]


@dataclass
class Name(_Record):
    """A person's family and given name."""

    family_name: str = ""
    given_name: str = ""


@dataclass
class User(_Record):
    """A user as known to the identity provider and the SCIM side."""

    ipid: str = ""
    scimid: str = ""
    name: Name = field(default_factory=Name)
    display_name: str = ""
    email: str = ""
    active: bool = False
    hash_code: str = ""

    _nested = {"name": Name}


@dataclass
class Group(_Record):
    """A group as known to the identity provider and the SCIM side."""

    ipid: str = ""
    scimid: str = ""
    name: str = ""
    email: str = ""
    hash_code: str = ""


@dataclass
class Member(_Record):
    """A member of a group."""

    ipid: str = ""
    scimid: str = ""
    email: str = ""
    status: str = ""
    hash_code: str = ""


@dataclass
class GroupMembers(_Counted):
    """A group together with its members; ``items`` defaults to their count."""

    group: Group | None = None
    resources: list[Member] = field(default_factory=list)
    items: int | None = None
    hash_code: str = ""

    _nested = {"group": Group, "resources": Member}


@dataclass
class GroupsResult(_Counted):
    """A collection of groups; ``items`` defaults to their count."""

    resources: list[Group] = field(default_factory=list)
    items: int | None = None
    hash_code: str = ""

    _nested = {"resources": Group}


@dataclass
class UsersResult(_Counted):
    """A collection of users; ``items`` defaults to their count."""

    resources: list[User] = field(default_factory=list)
    items: int | None = None
    hash_code: str = ""

    _nested = {"resources": User}


@dataclass
class GroupsMembersResult(_Counted):
    """A collection of groups with their members; ``items`` defaults to their count."""

    resources: list[GroupMembers] = field(default_factory=list)
    items: int | None = None
    hash_code: str = ""

    _nested = {"resources": GroupMembers}


@dataclass
class StateResources(_Record):
    """The groups, users and memberships recorded in a state."""

    groups: GroupsResult | None = None
    users: UsersResult | None = None
    groups_members: GroupsMembersResult | None = None

    _nested = {"groups": GroupsResult, "users": UsersResult, "groups_members": GroupsMembersResult}


@dataclass
class State(_Record):
    """The persisted result of the last synchronization."""

    schema_version: str = ""
    code_version: str = ""
    last_sync: str = ""
    hash_code: str = ""
    resources: StateResources | None = None

    _nested = {"resources": StateResources}

    def to_dict(self) -> dict[str, Any]:
        """Return the state as JSON-compatible data."""
        return self._to_dict()

    @classmethod
    def from_dict(cls, data: Any) -> State:
        """Build a state from decoded JSON; raises TypeError on malformed data."""
        return cls._from_dict(data)