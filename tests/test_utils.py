import json
from dataclasses import dataclass

import pytest

from idpscim.utils import to_json, to_yaml


@dataclass
class _Sample:
    a: str
    b: int
    c: bool = False


@pytest.mark.parametrize("value", [None, ""])
def test_to_json_empty_values(value):
    assert to_json(value) == ""


def test_to_json_bad_argument():
    with pytest.raises(TypeError):
        to_json({"this will fail when is serialize": object()})


def test_to_json_struct_like_value():
    got = to_json({"A": "my string", "B": 0, "C": False})
    assert got == '{\n  "A": "my string",\n  "B": 0,\n  "C": false\n}'


def test_to_json_dataclass_round_trip():
    got = to_json(_Sample(a="my string", b=0))
    assert json.loads(got) == {"a": "my string", "b": 0, "c": False}


@pytest.mark.parametrize("value", [None, ""])
def test_to_yaml_empty_values(value):
    assert to_yaml(value) == ""


def test_to_yaml_bad_argument():
    with pytest.raises(TypeError):
        to_yaml({"this will fail when is serialize": object()})


def test_to_yaml_dataclass():
    assert to_yaml(_Sample(a="my string", b=0)) == "a: my string\nb: 0\nc: false\n"


def test_to_json_nested_list_round_trip():
    data = {"items": [{"A": "x"}, {"A": "y"}], "count": 2}
    assert json.loads(to_json(data)) == data