"""Assembly of group patch requests within the per-request member limit."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from idpscim.models import GroupMembers
from idpscim.scim_api import PATCH_OP_SCHEMA, Operation, Patch, PatchGroupRequest, ScimGroup

MAX_PATCH_GROUP_MEMBERS_PER_REQUEST = 100


@dataclass(frozen=True)
class PatchValue:
    """A member reference carried in a patch operation."""

    value: str


def patch_group_operations(
    op: str,
    path: str,
    values: Sequence[PatchValue],
    group_members: GroupMembers,
) -> list[PatchGroupRequest]:
    """Split ``values`` into patch requests of at most the allowed member count.

    A single request is returned when the values fit, even when there are none.
    """
    group = group_members.group
    if group is None:
        raise ValueError("group members have no group")

    values = list(values)
    limit = MAX_PATCH_GROUP_MEMBERS_PER_REQUEST
    if len(values) > limit:
        chunks = [values[start : start + limit] for start in range(0, len(values), limit)]
    else:
        chunks = [values]

    return [
        PatchGroupRequest(
            group=ScimGroup(id=group.scimid, display_name=group.name),
            patch=Patch(
                schemas=[PATCH_OP_SCHEMA],
                operations=[Operation(op=op, path=path, value=chunk)],
            ),
        )
        for chunk in chunks
    ]