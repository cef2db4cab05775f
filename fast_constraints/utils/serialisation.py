import re
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


def serialise(val: Any) -> Any:
    """Convert a value into something `jsonify` can emit."""
    if isinstance(val, (datetime, date)):
        return val.isoformat()
    if isinstance(val, Decimal):
        return str(val)
    if isinstance(val, Enum):
        return serialise(val.value)
    elif isinstance(val, (list, tuple, set, frozenset)):
        return [serialise(item) for item in val]
    elif isinstance(val, dict):
        return {str(key): serialise(value) for key, value in val.items()}

    return val


def pascal_case_to_snake_case(pascal: type | str) -> str:
    """
    Convert a class name (CamelCase or PascalCase) to snake_case.

    Args:
        pascal: The class or class name as a string.

    Returns:
        str: The snake_case version of the class name.
    """
    if not isinstance(pascal, str):
        pascal = pascal.__name__
    s1 = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', pascal)
    return re.sub('([a-z0-9])([A-Z])', r'\1_\2', s1).lower()


def get_exception_error_type(exception: Exception) -> str:
    """`ValidationFailure` -> `validation_failure`, `BadRequestException` -> `bad_request`."""
    name = exception.__class__.__name__
    if name.endswith("Exception") and name != "Exception":
        name = name[: -len("Exception")]
    return pascal_case_to_snake_case(name)


def describe_type_id(type_id: Any) -> str:
    """Human readable name of a registry type identifier for logs and errors."""
    if isinstance(type_id, str):
        return type_id
    qualname = getattr(type_id, "__qualname__", None) or getattr(type_id, "__name__", None)
    if qualname:
        return qualname
    return repr(type_id)
