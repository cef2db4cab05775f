from __future__ import annotations

import inspect
import typing
from typing import Any, Awaitable, Callable, Optional

from quart import g, request

from fast_constraints.contracts.middleware import Middleware
from fast_constraints.core.api import decode_and_validate, get_registry, is_schema, read_body, read_query
from fast_constraints.core.outcome import ValidationOutcome
from fast_constraints.core.registry import ConstraintRegistry
from fast_constraints.exceptions import ValidationFailure

_QUERY_METHODS = {"GET", "DELETE", "HEAD", "OPTIONS"}


class ConstraintValidationMiddleware(Middleware):
    """Validate path parameters and inject validated schemas before the handler runs.

    - If the handler itself is registered in the constraint registry, its path
      parameters are validated against those constraints.
    - Every handler parameter annotated with a registered pydantic model is
      decoded from the query string (GET/DELETE/HEAD/OPTIONS) or the JSON body
      (other methods), validated, and injected as that argument.

    Violations from all sources of one request are reported together in a
    single `ValidationFailure`. The middleware is a no-op for handlers with
    nothing registered.
    """

    def __init__(self, registry: Optional[ConstraintRegistry] = None) -> None:
        self.registry = registry

    async def handle(self, next_handler: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        registry = self.registry if self.registry is not None else get_registry()
        handler = inspect.unwrap(next_handler)

        outcome = ValidationOutcome()
        sources: list[str] = []

        if handler in registry:
            path_params, path_outcome = decode_and_validate(handler, dict(kwargs), registry, source="path")
            g.validated_path = path_params
            if not path_outcome.is_valid:
                outcome = outcome.merge(path_outcome)
                sources.append("path")

        injected: dict[str, Any] = {}
        for name, schema in self._schema_parameters(handler, registry).items():
            if name in kwargs:
                continue
            if request.method.upper() in _QUERY_METHODS:
                source, raw = "query", read_query(schema)
            else:
                source, raw = "body", await read_body()

            instance, part = decode_and_validate(schema, raw, registry)
            if not part.is_valid:
                outcome = outcome.merge(part)
                sources.append(source)
            injected[name] = instance

        if not outcome.is_valid:
            raise ValidationFailure(outcome, source="+".join(sources))

        return await next_handler(*args, **{**kwargs, **injected})

    @staticmethod
    def _schema_parameters(handler: Callable, registry: ConstraintRegistry) -> dict[str, type]:
        try:
            hints = typing.get_type_hints(handler)
        except (NameError, TypeError):
            hints = {}

        found: dict[str, type] = {}
        for name, param in inspect.signature(handler).parameters.items():
            annotation = hints.get(name, param.annotation)
            if is_schema(annotation) and annotation in registry:
                found[name] = annotation
        return found
