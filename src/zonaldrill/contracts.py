"""Schema validation helpers for drill requests and results."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any, Mapping

import jsonschema

SCHEMA_VERSION = "1"


@lru_cache(maxsize=None)
def _load_schema(name: str) -> dict[str, Any]:
    """Load a JSON schema bundled in the package."""
    with resources.files("zonaldrill.schemas").joinpath(name).open("r", encoding="utf-8") as handle:
        return json.load(handle)


def validate_drill_request(payload: Mapping[str, Any]) -> None:
    """Validate a drill request payload against the schema."""
    schema = _load_schema("drill_request.schema.json")
    jsonschema.validate(dict(payload), schema)


def validate_drill_result(payload: Mapping[str, Any]) -> None:
    """Validate a serialized drill result against the schema."""
    schema = _load_schema("drill_result.schema.json")
    jsonschema.validate(dict(payload), schema)
