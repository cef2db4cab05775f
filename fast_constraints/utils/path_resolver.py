from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List

from fast_constraints.exceptions import MissingPathError

_MISSING = object()


def split_path(path_expr: str) -> List[str]:
    """
    Split a target path into tokens.

    Supported syntax:
      - field
      - a.b.c
      - list[*]
      - Combinations like a.list[*].b
      - An optional leading `$.` (`$.a.b` is the same as `a.b`)
    """
    expr = path_expr.strip()
    if expr.startswith("$"):
        expr = expr[1:].lstrip(".")
    tokens = [part for part in expr.split(".") if part]
    if not tokens:
        raise ValueError(f"Empty path expression: {path_expr!r}")
    return tokens


def _get(current: Any, key: str) -> Any:
    if isinstance(current, Mapping):
        return current.get(key, _MISSING)
    return getattr(current, key, _MISSING)


def resolve_path(data: Any, path_expr: str) -> List[tuple[str, Any]]:
    """
    Resolve a target path against a mapping or an object.

    Keys are looked up on mappings and attributes on anything else. A `[*]`
    suffix fans out over every item of a list or tuple and reports it as
    `key[index]`.

    Returns:
        A list of (field_name, value) pairs. A wildcard over an empty list
        yields no pairs.

    Raises:
        MissingPathError: If any key or attribute along the path is absent.
    """
    results: List[tuple[str, Any]] = [("", data)]

    for token in split_path(path_expr):
        wildcard = token.endswith("[*]")
        key = token[:-3] if wildcard else token
        next_results: List[tuple[str, Any]] = []

        for name, current in results:
            if current is None and name:
                # Nested value is absent, the constraints below it do not apply
                continue
            value = _get(current, key)
            if value is _MISSING:
                raise MissingPathError(path_expr, data)

            field_name = f"{name}.{key}" if name else key
            if not wildcard:
                next_results.append((field_name, value))
                continue

            if value is None:
                # Absent container, nothing to fan out over
                continue
            if not isinstance(value, (list, tuple)):
                raise MissingPathError(path_expr, data)
            for idx, item in enumerate(value):
                next_results.append((f"{field_name}[{idx}]", item))

        results = next_results

    return results
