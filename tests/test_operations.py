import pytest

from idpscim.models import Group, GroupMembers
from idpscim.operations import (
    MAX_PATCH_GROUP_MEMBERS_PER_REQUEST,
    PatchValue,
    patch_group_operations,
)
from idpscim.scim_api import Operation, Patch, PatchGroupRequest, ScimGroup

SCHEMA = "urn:ietf:params:scim:api:messages:2.0:PatchOp"


def patch_values(start, count):
    return [PatchValue(value=str(number)) for number in range(start, start + count)]


def expected_request(group_id, name, op, path, values):
    return PatchGroupRequest(
        group=ScimGroup(id=group_id, display_name=name),
        patch=Patch(
            schemas=[SCHEMA],
            operations=[Operation(op=op, path=path, value=values)],
        ),
    )


def test_one_member():
    member_id = "906722b2be-ee23ed58-6e4e-4b2f-a94a-3ace8456a36c"
    group_id = "016722b2be-ee23ed58-6e4e-4b2f-a94a-3ace8456a36d"
    gms = GroupMembers(group=Group(scimid=group_id, name="group 1"))

    got = patch_group_operations("add", "members", [PatchValue(value=member_id)], gms)

    assert got == [
        expected_request(group_id, "group 1", "add", "members", [PatchValue(value=member_id)])
    ]


def test_more_than_100():
    group_id = "016722b2be-ee23ed58-6e4e-4b2f-a94a-3ace8456a36e"
    gms = GroupMembers(group=Group(scimid=group_id, name="group 1"))

    got = patch_group_operations("add", "members", patch_values(1, 120), gms)

    assert got == [
        expected_request(group_id, "group 1", "add", "members", patch_values(1, 100)),
        expected_request(group_id, "group 1", "add", "members", patch_values(101, 20)),
    ]


@pytest.mark.parametrize(
    ("count", "requests"),
    [(0, 1), (1, 1), (100, 1), (101, 2), (155, 2), (200, 2), (207, 3)],
)
def test_request_count_and_order(count, requests):
    gms = GroupMembers(group=Group(scimid="1", name="group 1"))
    values = patch_values(1, count)

    got = patch_group_operations("remove", "members", values, gms)

    assert len(got) == requests
    flattened = [v for request in got for v in request.patch.operations[0].value]
    assert flattened == values
    assert all(
        len(request.patch.operations[0].value) <= MAX_PATCH_GROUP_MEMBERS_PER_REQUEST
        for request in got
    )
    assert all(request.patch.operations[0].op == "remove" for request in got)


def test_input_list_is_not_shared_with_request():
    gms = GroupMembers(group=Group(scimid="1", name="group 1"))
    values = [PatchValue(value="1")]

    got = patch_group_operations("add", "members", values, gms)
    values.append(PatchValue(value="2"))

    assert got[0].patch.operations[0].value == [PatchValue(value="1")]


def test_missing_group_raises():
    with pytest.raises(ValueError):
        patch_group_operations("add", "members", [PatchValue(value="1")], GroupMembers())