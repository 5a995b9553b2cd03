from __future__ import annotations

import re
from typing import Any, Dict, Mapping

from pydantic import BaseModel
from pydantic.config import ConfigDict

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(word.capitalize() for word in parts[1:])


def to_snake(value: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", value).lower()


def keys_to_snake(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {to_snake(key): value for key, value in payload.items()}


def keys_to_camel(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {to_camel(key): value for key, value in payload.items()}


class BaseSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
