import typing
from typing import Any, Hashable, Optional

from pydantic import BaseModel, ValidationError
from quart import current_app, g, request

from fast_constraints.core.constraints import Range
from fast_constraints.core.outcome import ValidationOutcome, Violation
from fast_constraints.core.registry import ConstraintRegistry
from fast_constraints.core.validator import Validator
from fast_constraints.exceptions import BadRequestException, SchemaError, ValidationFailure
from fast_constraints.utils.annotation_utils import unwrap_annotation
from fast_constraints.utils.path_resolver import resolve_path
from fast_constraints.utils.serialisation import describe_type_id

__all__ = [
    "REGISTRY_EXTENSION_KEY",
    "get_registry",
    "is_schema",
    "outcome_from_pydantic_error",
    "decode_and_validate",
    "read_body",
    "read_query",
    "validate_body",
    "validate_query",
    "validate_path",
]

REGISTRY_EXTENSION_KEY = "fast_constraints.registry"

_LIST_ORIGINS = (list, tuple, set, frozenset)
_TEXT_SOURCES = ("path", "query")


def get_registry() -> ConstraintRegistry:
    """Return the constraint registry installed on the current Quart app."""
    registry = current_app.extensions.get(REGISTRY_EXTENSION_KEY)
    if registry is None:
        raise SchemaError("No constraint registry installed on the application, use register_routes(..., registry=...)")
    return registry


def is_schema(type_id: Any) -> bool:
    return isinstance(type_id, type) and issubclass(type_id, BaseModel)


def _format_loc(loc: tuple) -> str:
    name = ""
    for part in loc:
        if isinstance(part, int):
            name += f"[{part}]"
        else:
            name = f"{name}.{part}" if name else str(part)
    return name


def outcome_from_pydantic_error(error: ValidationError) -> ValidationOutcome:
    """Express pydantic shape/type errors as violations so clients see a single error shape."""
    return ValidationOutcome(tuple(
        Violation(
            field_name=_format_loc(tuple(item.get("loc", ()))),
            message=item.get("msg", "is invalid"),
            rejected_value=item.get("input"),
            kind=item.get("type", ""),
        )
        for item in error.errors()
    ))


def decode_and_validate(
    type_id: Hashable,
    raw: Any,
    registry: Optional[ConstraintRegistry] = None,
    *,
    source: Optional[str] = None,
) -> tuple[Any, ValidationOutcome]:
    """
    Decode `raw` (when `type_id` is a pydantic model) and evaluate its constraints.

    Path and query values reach untyped ids as text. A Range over such a value
    is a configuration error (a missing `<int:...>` converter or schema), so it
    raises `SchemaError` instead of rejecting every request.

    Returns:
        The decoded instance (or `raw` itself) and the outcome. If decoding
        fails, the instance is None and the outcome holds the decoding errors.
    """
    registry = registry if registry is not None else get_registry()
    # Unknown types are a configuration error, fail before touching the input
    constraints = registry.lookup(type_id)

    instance = raw
    if source in _TEXT_SOURCES and not is_schema(type_id):
        _check_text_values(type_id, raw, constraints)
    if is_schema(type_id):
        try:
            instance = type_id.model_validate(raw)
        except ValidationError as e:
            return None, outcome_from_pydantic_error(e)

    return instance, Validator(registry).validate(instance, type_id)


def _check_text_values(type_id: Hashable, raw: Any, constraints: tuple) -> None:
    for constraint in constraints:
        if not isinstance(constraint, Range):
            continue
        for field_name, value in resolve_path(raw, constraint.target_path):
            if isinstance(value, str):
                raise SchemaError(
                    f"[Range] `{field_name}` of `{describe_type_id(type_id)}` is received as text, "
                    f"declare a numeric converter (e.g. <int:{field_name}>) or a schema"
                )


def _raise_or_return(instance: Any, outcome: ValidationOutcome, source: str) -> Any:
    if not outcome.is_valid:
        raise ValidationFailure(outcome, source=source)
    return instance


async def read_body() -> dict:
    """Decoded JSON object of the request. An empty body reads as `{}`."""
    if not (await request.get_data()).strip():
        return {}

    json_data = await request.get_json(force=True, silent=True)
    if not isinstance(json_data, dict):
        raise BadRequestException(error_type="invalid_body", message="Request body must be a JSON object")
    return json_data


def read_query(schema: Optional[type[BaseModel]] = None) -> dict:
    """
    Flatten the query string into a dict.

    List fields of `schema` accept repeated keys, `key[]` and comma separated
    values, merged in that order. Scalars keep the first value.
    """
    args = request.args
    keys = dict.fromkeys(key[:-2] if key.endswith("[]") else key for key in args.keys())

    data: dict[str, Any] = {}
    for key in keys:
        values = args.getlist(key) + args.getlist(f"{key}[]")
        if schema is not None and _is_list_field(schema, key):
            data[key] = [part for value in values for part in value.split(",") if part != ""]
        else:
            data[key] = values[0]
    return data


def _is_list_field(schema: type[BaseModel], key: str) -> bool:
    field = schema.model_fields.get(key)
    if field is None:
        return False
    return typing.get_origin(unwrap_annotation(field.annotation)) in _LIST_ORIGINS


async def validate_body(type_id: Hashable, *, registry: Optional[ConstraintRegistry] = None) -> Any:
    """Validate the JSON request body. Stores the instance in `g.validated` and returns it.

    Raises:
        ValidationFailure: If the body does not decode or a constraint does not hold.
    """
    instance, outcome = decode_and_validate(type_id, await read_body(), registry)
    g.validated = _raise_or_return(instance, outcome, "body")
    return g.validated


async def validate_query(type_id: Hashable, *, registry: Optional[ConstraintRegistry] = None) -> Any:
    """Validate the query string. Stores the instance in `g.validated_query` and returns it."""
    schema = type_id if is_schema(type_id) else None
    instance, outcome = decode_and_validate(type_id, read_query(schema), registry, source="query")
    g.validated_query = _raise_or_return(instance, outcome, "query")
    return g.validated_query


async def validate_path(
    type_id: Hashable,
    params: Optional[dict] = None,
    *,
    registry: Optional[ConstraintRegistry] = None,
) -> Any:
    """Validate path parameters (defaults to the matched `request.view_args`)."""
    raw = dict(params if params is not None else (request.view_args or {}))
    instance, outcome = decode_and_validate(type_id, raw, registry, source="path")
    g.validated_path = _raise_or_return(instance, outcome, "path")
    return g.validated_path
