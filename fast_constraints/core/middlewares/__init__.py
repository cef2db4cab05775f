"""Middlewares shipped with the package.

Both are installed on every route by `register_routes`.
"""

from .handle_exceptions_middleware import HandleExceptionsMiddleware
from .constraint_validation_middleware import ConstraintValidationMiddleware

__all__ = [
    "HandleExceptionsMiddleware",
    "ConstraintValidationMiddleware",
]
