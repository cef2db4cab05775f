from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Type

from pydantic import BaseModel

from fast_constraints.core.constraints import parse_constraint
from fast_constraints.core.registry import ConstraintRegistry
from fast_constraints.exceptions import SchemaError

_KEY_ALIASES = {
    "targetPath": "target_path",
    "messageTemplate": "message_template",
}


def _normalise_entry(entry: Any) -> dict:
    if not isinstance(entry, dict):
        raise SchemaError(f"Constraint declaration must be an object, got {entry!r}")
    return {_KEY_ALIASES.get(key, key): value for key, value in entry.items()}


def registry_from_mapping(
    data: Mapping[str, Any],
    *,
    schemas: Optional[Mapping[str, Type[BaseModel]]] = None,
    registry: Optional[ConstraintRegistry] = None,
    freeze: bool = True,
) -> ConstraintRegistry:
    """
    Build a registry from its declarative form:

        {
            "types": {
                "InputSchema": [
                    {"kind": "range", "target_path": "number_between_one_and_ten", "min": 1, "max": 10},
                    {"kind": "pattern", "target_path": "ip_address", "regexp": "^[0-9]{1,3}(\\\\.[0-9]{1,3}){3}$"}
                ],
                "get_by_id": [{"kind": "range", "targetPath": "id", "min": 5}]
            }
        }

    Args:
        data: The parsed document.
        schemas: Maps type names to pydantic models. A mapped name is
            registered under the model class and checked against its fields,
            any other name is registered as a string type id.
        registry: Registry to populate, a new one by default.
        freeze: Freeze the registry once populated.

    Raises:
        SchemaError: If the document or any constraint in it is malformed.
    """
    types = data.get("types") if isinstance(data, Mapping) else None
    if not isinstance(types, Mapping):
        raise SchemaError('Constraint schema must contain a "types" object')

    schemas = schemas or {}
    registry = registry if registry is not None else ConstraintRegistry()

    for name, entries in types.items():
        if not isinstance(entries, list):
            raise SchemaError(f"Constraints of `{name}` must be a list")
        constraints = [parse_constraint(_normalise_entry(entry)) for entry in entries]
        registry.register(schemas.get(name, name), constraints)

    if freeze:
        registry.freeze()
    return registry


def load_registry(
    path: str | Path,
    *,
    schemas: Optional[Mapping[str, Type[BaseModel]]] = None,
    freeze: bool = True,
) -> ConstraintRegistry:
    """Load a registry from a JSON schema file. See `registry_from_mapping` for the format."""
    schema_file = Path(path)
    try:
        with schema_file.open(encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SchemaError(f"Could not read constraint schema {schema_file}: {e}") from e

    registry = registry_from_mapping(data, schemas=schemas, freeze=freeze)
    logging.info(f"Loaded constraints for {len(registry)} type(s) from {schema_file}")
    return registry
