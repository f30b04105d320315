import io
import json

import pytest

from idpscim.disk import (
    DiskRepository,
    ReadingStateFileError,
    RepositoryError,
    StateFileEmptyError,
    StateFileNilError,
)
from idpscim.models import Group, GroupsResult, Name, State, StateResources, User, UsersResult

GOLDEN_STATE = {
    "schemaVersion": "1.0.0",
    "codeVersion": "0.0.1",
    "lastSync": "2021-09-25T20:49:46+02:00",
    "hashCode": "hashCode",
    "resources": {
        "groups": {
            "items": 1,
            "hashCode": "123456789",
            "resources": [
                {
                    "ipid": "1",
                    "name": "group 1",
                    "email": "group.1@example.com",
                    "hashCode": "123456789",
                }
            ],
        },
        "users": {
            "items": 1,
            "hashCode": "hashCode",
            "resources": [
                {
                    "ipid": "1",
                    "name": {"familyName": "1", "givenName": "user"},
                    "displayName": "user 1",
                    "email": "user.1@example.com",
                    "active": True,
                    "hashCode": "123456789",
                }
            ],
        },
    },
}


class _FailingStream:
    def read(self):
        raise OSError("device not ready")

    def write(self, data):
        raise OSError("device not ready")


def _sample_state() -> State:
    return State(
        last_sync="2021-09-25T20:49:46+02:00",
        hash_code="hashCode",
        resources=StateResources(
            groups=GroupsResult(
                items=1,
                hash_code="1234567890",
                resources=[
                    Group(
                        ipid="1",
                        name="group 1",
                        email="group.1@example.com",
                        hash_code="123456789",
                    )
                ],
            ),
            users=UsersResult(
                items=1,
                hash_code="hashCode",
                resources=[
                    User(
                        ipid="1",
                        name=Name(family_name="1", given_name="user"),
                        display_name="user 1",
                        email="user.1@example.com",
                        hash_code="123456789",
                    )
                ],
            ),
        ),
    )


def test_new_repository_with_none_raises():
    with pytest.raises(StateFileNilError):
        DiskRepository(None)


def test_get_state_empty_file_raises(tmp_path):
    path = tmp_path / "state.json"
    path.write_text("")
    with path.open("r+") as state_file:
        repo = DiskRepository(state_file)
        with pytest.raises(StateFileEmptyError) as info:
            repo.get_state()
    assert str(info.value) == "state file is empty"


def test_get_state_golden_file(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps(GOLDEN_STATE, indent=2))
    with path.open("r+") as state_file:
        state = DiskRepository(state_file).get_state()

    assert state.last_sync == "2021-09-25T20:49:46+02:00"
    assert state.hash_code == "hashCode"

    assert state.resources.groups.items == 1
    assert state.resources.groups.hash_code == "123456789"
    assert len(state.resources.groups.resources) == 1

    assert state.resources.users.items == 1
    assert state.resources.users.hash_code == "hashCode"
    assert len(state.resources.users.resources) == 1
    assert state.resources.users.resources[0].ipid == "1"
    assert state.resources.users.resources[0].display_name == "user 1"


def test_get_state_from_binary_stream():
    stream = io.BytesIO(json.dumps(GOLDEN_STATE).encode("utf-8"))
    state = DiskRepository(stream).get_state()
    assert state.schema_version == "1.0.0"
    assert state.code_version == "0.0.1"


def test_get_state_invalid_json_raises():
    with pytest.raises(RepositoryError) as info:
        DiskRepository(io.StringIO("not json")).get_state()
    assert "unmarshalling" in str(info.value)


def test_get_state_wrong_shape_raises():
    with pytest.raises(RepositoryError):
        DiskRepository(io.StringIO("[1, 2, 3]")).get_state()


def test_get_state_read_failure_raises():
    with pytest.raises(ReadingStateFileError) as info:
        DiskRepository(_FailingStream()).get_state()
    assert "device not ready" in str(info.value)


def test_set_state_then_get_state_round_trip(tmp_path):
    path = tmp_path / "state.json"
    with path.open("w+") as state_file:
        DiskRepository(state_file).set_state(_sample_state())

    with path.open("r") as state_file_ro:
        state = DiskRepository(state_file_ro).get_state()

    assert state.last_sync == "2021-09-25T20:49:46+02:00"
    assert state.hash_code == "hashCode"

    assert state.resources.groups.items == 1
    assert state.resources.groups.hash_code == "1234567890"
    assert len(state.resources.groups.resources) == 1

    assert state.resources.users.items == 1
    assert state.resources.users.hash_code == "hashCode"
    assert len(state.resources.users.resources) == 1
    assert state.resources.users.resources[0].ipid == "1"
    assert state.resources.users.resources[0].display_name == "user 1"


def test_set_state_writes_indented_json_with_newline():
    stream = io.StringIO()
    state = _sample_state()
    DiskRepository(stream).set_state(state)
    text = stream.getvalue()
    assert text.startswith('{\n  "schemaVersion"')
    assert text.endswith("}\n")
    assert json.loads(text) == state.to_dict()


def test_set_state_to_binary_stream():
    stream = io.BytesIO()
    state = _sample_state()
    DiskRepository(stream).set_state(state)
    assert json.loads(stream.getvalue().decode("utf-8")) == state.to_dict()


def test_set_state_none_writes_null():
    stream = io.StringIO()
    DiskRepository(stream).set_state(None)
    assert stream.getvalue() == "null\n"


def test_set_state_write_failure_raises():
    with pytest.raises(RepositoryError):
        DiskRepository(_FailingStream()).set_state(_sample_state())