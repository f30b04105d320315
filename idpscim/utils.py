"""Pretty JSON and YAML rendering of plain data, dataclasses and models."""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from typing import Any

import yaml


def _plain(obj: Any) -> Any:
    """Convert ``obj`` into nested dicts, lists and scalars."""
    if obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return _plain(to_dict())
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _plain(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    if isinstance(obj, Mapping):
        plain = {}
        for key, value in obj.items():
            if isinstance(key, bool) or not isinstance(key, (str, int)):
                raise TypeError(f"cannot serialize mapping key of type {type(key).__name__}")
            plain[str(key)] = _plain(value)
        return plain
    if isinstance(obj, (list, tuple)):
        return [_plain(item) for item in obj]
    raise TypeError(f"cannot serialize object of type {type(obj).__name__}")


def to_json(obj: Any) -> str:
    """Return ``obj`` as indented JSON, or an empty string for None or ``""``."""
    if obj is None or obj == "":
        return ""
    return json.dumps(_plain(obj), indent=2, ensure_ascii=False, allow_nan=False)


def to_yaml(obj: Any) -> str:
    """Return ``obj`` as block-style YAML, or an empty string for None or ``""``."""
    if obj is None or obj == "":
        return ""
    return yaml.safe_dump(
        _plain(obj), sort_keys=False, allow_unicode=True, default_flow_style=False
    )