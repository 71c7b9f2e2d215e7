"""Small single-purpose helpers."""

import copy
import json
from pathlib import Path
from typing import Any, TypeVar, Union

T = TypeVar("T")


def read_json(path: Union[str, Path]) -> Any:
    """Read a JSON document from disk."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def deep_clone(source: T) -> T:
    """Return a deep copy of a record or plain data structure."""
    return copy.deepcopy(source)
