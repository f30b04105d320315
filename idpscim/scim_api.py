"""Request and response types of the SCIM endpoint, and the client interface used to reach it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

PATCH_OP_SCHEMA = "urn:ietf:params:scim:api:messages:2.0:PatchOp"


@dataclass
class Email:
    """An e-mail address of a SCIM user."""

    value: str = ""
    type: str = ""
    primary: bool = False


@dataclass
class ScimName:
    """The name of a SCIM user."""

    family_name: str = ""
    given_name: str = ""


@dataclass
class Meta:
    """Resource metadata returned by the SCIM endpoint."""

    resource_type: str = ""
    created: str = ""
    last_modified: str = ""


@dataclass
class ScimMember:
    """A reference to a member of a SCIM group."""

    value: str = ""


@dataclass
class ScimGroup:
    """A group as held by the SCIM endpoint."""

    id: str = ""
    external_id: str = ""
    display_name: str = ""
    schemas: list[str] = field(default_factory=list)
    members: list[ScimMember] = field(default_factory=list)
    meta: Meta = field(default_factory=Meta)


@dataclass
class _UserFields:
    id: str = ""
    external_id: str = ""
    user_name: str = ""
    name: ScimName = field(default_factory=ScimName)
    display_name: str = ""
    active: bool = False
    emails: list[Email] = field(default_factory=list)


@dataclass
class ScimUser(_UserFields):
    """A user as held by the SCIM endpoint."""

    schemas: list[str] = field(default_factory=list)
    meta: Meta = field(default_factory=Meta)


@dataclass
class CreateUserRequest(_UserFields):
    """The body of a request that creates a user."""


@dataclass
class PutUserRequest(_UserFields):
    """The body of a request that replaces a user."""


@dataclass
class CreateUserResponse(ScimUser):
    """The user returned after it was created."""


@dataclass
class PutUserResponse(ScimUser):
    """The user returned after it was replaced."""


@dataclass
class GetUserResponse(ScimUser):
    """A single user fetched from the SCIM endpoint."""


@dataclass
class _ListResponse:
    total_results: int = 0
    items_per_page: int = 0
    start_index: int = 0
    schemas: list[str] = field(default_factory=list)


@dataclass
class ListGroupsResponse(_ListResponse):
    """A page of groups returned by a list request."""

    resources: list[ScimGroup] = field(default_factory=list)


@dataclass
class ListUsersResponse(_ListResponse):
    """A page of users returned by a list request."""

    resources: list[ScimUser] = field(default_factory=list)


@dataclass
class CreateGroupRequest:
    """The body of a request that creates a group."""

    display_name: str = ""
    external_id: str = ""
    members: list[ScimMember] = field(default_factory=list)


@dataclass
class CreateGroupResponse:
    """The group returned after it was created."""

    id: str = ""
    external_id: str = ""
    display_name: str = ""
    meta: Meta = field(default_factory=Meta)
    schemas: list[str] = field(default_factory=list)


@dataclass
class Operation:
    """One operation of a patch request."""

    op: str = ""
    path: str = ""
    value: Any = None


@dataclass
class Patch:
    """The body of a patch request."""

    schemas: list[str] = field(default_factory=lambda: [PATCH_OP_SCHEMA])
    operations: list[Operation] = field(default_factory=list)


@dataclass
class PatchGroupRequest:
    """A patch to apply to a group."""

    group: ScimGroup = field(default_factory=ScimGroup)
    patch: Patch = field(default_factory=Patch)


class ScimClient(Protocol):
    """The operations of a SCIM endpoint that the provider relies on."""

    def list_users(self, filter_expr: str) -> ListUsersResponse: ...

    def create_user(self, request: CreateUserRequest) -> CreateUserResponse: ...

    def create_or_get_user(self, request: CreateUserRequest) -> CreateUserResponse: ...

    def put_user(self, request: PutUserRequest) -> PutUserResponse: ...

    def delete_user(self, user_id: str) -> None: ...

    def get_user(self, user_id: str) -> GetUserResponse: ...

    def get_user_by_user_name(self, user_name: str) -> GetUserResponse: ...

    def list_groups(self, filter_expr: str) -> ListGroupsResponse: ...

    def create_group(self, request: CreateGroupRequest) -> CreateGroupResponse: ...

    def create_or_get_group(self, request: CreateGroupRequest) -> CreateGroupResponse: ...

    def delete_group(self, group_id: str) -> None: ...

    def patch_group(self, request: PatchGroupRequest) -> None: ...