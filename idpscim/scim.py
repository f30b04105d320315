"""Synchronization operations against a SCIM endpoint, expressed in terms of the identity models."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from idpscim.models import (
    Group,
    GroupMembers,
    GroupsMembersResult,
    GroupsResult,
    Member,
    User,
    Name,
    UsersResult,
)
from idpscim.operations import (
    MAX_PATCH_GROUP_MEMBERS_PER_REQUEST,
    PatchValue,
    patch_group_operations,
)
from idpscim.scim_api import (
    PATCH_OP_SCHEMA,
    CreateGroupRequest,
    CreateUserRequest,
    Email,
    Operation,
    Patch,
    PatchGroupRequest,
    PutUserRequest,
    ScimClient,
    ScimGroup,
    ScimName,
)

_LOG = logging.getLogger(__name__)


class ScimProviderError(Exception):
    """Raised when an operation against the SCIM endpoint fails."""


class ScimProviderNilError(ScimProviderError):
    """Raised when no SCIM client is given."""

    def __init__(self, message: str = "scim: Provider is nil") -> None:
        super().__init__(message)


@contextmanager
def _calling(prefix: str) -> Iterator[None]:
    """Turn any failure of the client into a ScimProviderError with ``prefix``."""
    try:
        yield
    except ScimProviderError:
        raise
    except Exception as exc:
        raise ScimProviderError(f"{prefix}{exc}") from exc


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _first_email(emails: list[Email], owner: str) -> str:
    if not emails:
        raise ScimProviderError(f"scim: user {owner} has no email")
    return emails[0].value


class Provider:
    """Reads and changes users, groups and memberships through a SCIM client."""

    def __init__(self, client: ScimClient | None) -> None:
        if client is None:
            raise ScimProviderNilError()
        self._client = client

    def get_groups(self) -> GroupsResult:
        """Return every group held by the SCIM endpoint."""
        with _calling("scim: error listing groups: "):
            response = self._client.list_groups("")

        groups = [
            Group(scimid=group.id, name=group.display_name, ipid=group.external_id)
            for group in response.resources
        ]
        return GroupsResult(resources=groups)

    def create_groups(self, groups_result: GroupsResult) -> GroupsResult:
        """Create the given groups, returning them with their SCIM ids."""
        groups: list[Group] = []
        for group in groups_result.resources:
            request = CreateGroupRequest(display_name=group.name, external_id=group.ipid)
            _LOG.debug(
                "creating group (details): group=%s idpid=%s email=%s",
                group.name, group.ipid, group.email,
            )
            _LOG.warning("creating group: group=%s", group.name)

            with _calling("scim: error creating group: "):
                response = self._client.create_or_get_group(request)

            groups.append(
                Group(
                    scimid=response.id,
                    name=group.name,
                    ipid=group.ipid,
                    email=group.email,
                )
            )
        return GroupsResult(resources=groups)

    def update_groups(self, groups_result: GroupsResult) -> GroupsResult:
        """Replace the id and external id of the given groups."""
        groups: list[Group] = []
        for group in groups_result.resources:
            request = PatchGroupRequest(
                group=ScimGroup(id=group.scimid, display_name=group.name),
                patch=Patch(
                    schemas=[PATCH_OP_SCHEMA],
                    operations=[
                        Operation(
                            op="replace",
                            value={"id": group.scimid, "externalId": group.ipid},
                        )
                    ],
                ),
            )
            _LOG.debug(
                "updating group (details): group=%s idpid=%s scimid=%s email=%s",
                group.name, group.ipid, group.scimid, group.email,
            )
            _LOG.warning("updating group: group=%s email=%s", group.name, group.email)

            with _calling("scim: error updating groups: "):
                self._client.patch_group(request)

            groups.append(
                Group(
                    scimid=group.scimid,
                    name=group.name,
                    ipid=group.ipid,
                    email=group.email,
                )
            )
        return GroupsResult(resources=groups)

    def delete_groups(self, groups_result: GroupsResult) -> None:
        """Delete the given groups by their SCIM ids."""
        for group in groups_result.resources:
            _LOG.debug(
                "deleting group (details): group=%s idpid=%s scimid=%s email=%s",
                group.name, group.ipid, group.scimid, group.email,
            )
            _LOG.debug("deleting group: group=%s email=%s", group.name, group.email)

            with _calling(f"scim: error deleting group: {group.scimid}, "):
                self._client.delete_group(group.scimid)

    def get_users(self) -> UsersResult:
        """Return every user held by the SCIM endpoint."""
        with _calling("scim: error listing users: "):
            response = self._client.list_users("")

        users = [
            User(
                ipid=user.external_id,
                scimid=user.id,
                name=Name(
                    family_name=user.name.family_name,
                    given_name=user.name.given_name,
                ),
                display_name=user.display_name,
                email=_first_email(user.emails, user.id),
                active=user.active,
            )
            for user in response.resources
        ]
        return UsersResult(resources=users)

    def create_users(self, users_result: UsersResult) -> UsersResult:
        """Create the given users, returning them with their SCIM ids."""
        users: list[User] = []
        for user in users_result.resources:
            request = CreateUserRequest(
                id="",
                user_name=user.email,
                display_name=user.display_name,
                external_id=user.ipid,
                name=ScimName(
                    family_name=user.name.family_name,
                    given_name=user.name.given_name,
                ),
                emails=[Email(value=user.email, type="work")],
                active=user.active,
            )
            _LOG.debug(
                "creating user: user=%s email=%s idpid=%s",
                user.display_name, user.email, user.ipid,
            )
            _LOG.warning("creating user: user=%s email=%s", user.display_name, user.email)

            with _calling("scim: error creating user: "):
                response = self._client.create_or_get_user(request)

            users.append(self._user_with_scimid(user, response.id))
        return UsersResult(resources=users)

    def update_users(self, users_result: UsersResult) -> UsersResult:
        """Replace the given users on the SCIM endpoint."""
        users: list[User] = []
        for user in users_result.resources:
            request = PutUserRequest(
                id=user.scimid,
                display_name=user.display_name,
                user_name=user.email,
                external_id=user.ipid,
                name=ScimName(
                    family_name=user.name.family_name,
                    given_name=user.name.given_name,
                ),
                emails=[Email(value=user.email, type="work", primary=True)],
                active=user.active,
            )
            _LOG.debug(
                "updating user (details): user=%s email=%s idpid=%s scimid=%s",
                user.display_name, user.email, user.ipid, user.scimid,
            )
            _LOG.warning("updating user: user=%s email=%s", user.display_name, user.email)

            with _calling("scim: error updating user: "):
                response = self._client.put_user(request)

            users.append(self._user_with_scimid(user, response.id))
        return UsersResult(resources=users)

    def delete_users(self, users_result: UsersResult) -> None:
        """Delete the given users by their SCIM ids."""
        for user in users_result.resources:
            _LOG.debug(
                "deleting user (details): user=%s email=%s scimid=%s idpid=%s",
                user.display_name, user.email, user.scimid, user.ipid,
            )
            _LOG.warning("deleting user: user=%s email=%s", user.display_name, user.email)

            with _calling(f"scim: error deleting user: {user.scimid}, "):
                self._client.delete_user(user.scimid)

    def create_groups_members(
        self, groups_members_result: GroupsMembersResult
    ) -> GroupsMembersResult:
        """Add the given members to their groups.

        Members without a SCIM id are looked up by e-mail, and the id found is
        stored on the given member.
        """
        result: list[GroupMembers] = []
        for group_members in groups_members_result.resources:
            group_name = group_members.group.name if group_members.group else ""
            members: list[Member] = []
            values: list[PatchValue] = []

            for member in group_members.resources:
                if not member.scimid:
                    with _calling("scim: error getting user by email: "):
                        found = self._client.get_user_by_user_name(member.email)
                    member.scimid = found.id

                values.append(PatchValue(value=member.scimid))
                members.append(
                    Member(
                        ipid=member.ipid,
                        scimid=member.scimid,
                        email=member.email,
                        status=member.status,
                    )
                )
                _LOG.debug(
                    "adding member to group (details): group=%s idpid=%s scimid=%s "
                    "email=%s status=%s",
                    group_name, member.ipid, member.scimid, member.email, member.status,
                )
                _LOG.warning("adding member to group: group=%s email=%s", group_name, member.email)

            result.append(GroupMembers(group=group_members.group, resources=members))
            self._send_patches("add", values, group_members, group_name)

        return GroupsMembersResult(resources=result)

    def delete_groups_members(self, groups_members_result: GroupsMembersResult) -> None:
        """Remove the given members from their groups."""
        for group_members in groups_members_result.resources:
            group_name = group_members.group.name if group_members.group else ""
            values: list[PatchValue] = []

            for member in group_members.resources:
                values.append(PatchValue(value=member.scimid))
                _LOG.debug(
                    "removing member from group (details): group=%s idpid=%s scimid=%s email=%s",
                    group_name, member.ipid, member.scimid, member.email,
                )
                _LOG.warning(
                    "removing member from group: group=%s email=%s", group_name, member.email
                )

            self._send_patches("remove", values, group_members, group_name)

    def get_groups_members(self, groups_result: GroupsResult) -> GroupsMembersResult:
        """Return the given groups with the members the endpoint lists for them."""
        result: list[GroupMembers] = []
        for group in groups_result.resources:
            with _calling("scim: error listing groups: "):
                listed = self._client.list_groups(f"displayName eq {_quote(group.name)}")

            for scim_group in listed.resources:
                members: list[Member] = []
                for scim_member in scim_group.members:
                    with _calling(f"scim: error getting user: {scim_member.value}, error "):
                        user = self._client.get_user(scim_member.value)
                    members.append(
                        Member(
                            scimid=scim_member.value,
                            email=_first_email(user.emails, scim_member.value),
                        )
                    )
                result.append(GroupMembers(group=group, resources=members))

        return GroupsMembersResult(resources=result)

    def get_groups_members_brute_force(
        self, groups_result: GroupsResult, users_result: UsersResult
    ) -> GroupsMembersResult:
        """Return the given groups with members, asking for every group and user pair."""
        result: list[GroupMembers] = []
        for group in groups_result.resources:
            members: list[Member] = []
            for user in users_result.resources:
                _LOG.debug(
                    "checking if user is member of group: group=%s user=%s scimid=%s ipid=%s",
                    group.name, user.email, user.scimid, user.ipid,
                )
                filter_expr = f"id eq {_quote(group.scimid)} and members eq {_quote(user.scimid)}"
                with _calling("scim: error listing groups: "):
                    listed = self._client.list_groups(filter_expr)

                # The endpoint reports membership only through the result count.
                if listed.total_results > 0:
                    members.append(
                        Member(
                            ipid=user.ipid,
                            scimid=user.scimid,
                            email=user.email,
                            status="ACTIVE" if user.active else "",
                        )
                    )
            result.append(GroupMembers(group=group, resources=members))

        return GroupsMembersResult(resources=result)

    @staticmethod
    def _user_with_scimid(user: User, scimid: str) -> User:
        return User(
            ipid=user.ipid,
            scimid=scimid,
            name=Name(family_name=user.name.family_name, given_name=user.name.given_name),
            display_name=user.display_name,
            email=user.email,
            active=user.active,
        )

    def _send_patches(
        self,
        op: str,
        values: list[PatchValue],
        group_members: GroupMembers,
        group_name: str,
    ) -> None:
        requests = patch_group_operations(op, "members", values, group_members)
        if len(requests) > 1:
            _LOG.warning(
                "group with more than %d members, sending multiple requests: "
                "group=%s members=%d requests=%d",
                MAX_PATCH_GROUP_MEMBERS_PER_REQUEST, group_name, len(values), len(requests),
            )
        for request in requests:
            with _calling("scim: error patching group: "):
                self._client.patch_group(request)