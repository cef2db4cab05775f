import functools
import inspect
from typing import Any, Callable, Hashable, Optional

from fast_constraints.core.registry import ConstraintRegistry
from fast_constraints.core.validator import Validator
from fast_constraints.exceptions import SchemaError


def validated(registry: ConstraintRegistry, type_id: Optional[Hashable] = None, *, argument: Optional[str] = None):
    """
    Validate an argument of a service function before it runs.

    Raises the same `ValidationFailure` as the HTTP entry points, so a service
    called from a route renders the same 400 payload.

    Args:
        registry: Registry holding the constraints.
        type_id: Constraints to use. Defaults to the type of the argument value.
        argument: Name of the parameter to validate. Defaults to the first
            parameter that is not `self` or `cls`.

    Example:
        @validated(registry)
        async def create(self, data: InputSchema): ...
    """
    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)
        names = [name for name in signature.parameters if name not in ("self", "cls")]
        target = argument or (names[0] if names else None)
        if target is None or target not in signature.parameters:
            raise SchemaError(f"@validated: `{func.__qualname__}` has no parameter to validate")

        validator = Validator(registry)

        def _check(args: tuple, kwargs: dict) -> None:
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            validator.check(bound.arguments[target], type_id, source="service")

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                _check(args, kwargs)
                return await func(*args, **kwargs)
            return async_wrapper

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            _check(args, kwargs)
            return func(*args, **kwargs)
        return sync_wrapper

    return decorator
