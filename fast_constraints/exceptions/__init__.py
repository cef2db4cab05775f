"""Custom exceptions for fast-constraints."""

from .common_exceptions import (
    AppException,
    ValidationFailure,
    SchemaError,
    DuplicateRegistrationError,
    UnknownTypeError,
    MissingPathError,
    EnvMissingException,
    EnvInvalidException,
)
from .http_exceptions import (
    HttpException,
    BadRequestException,
    ServerErrorException,
)


__all__ = [
    # common
    "AppException",
    "ValidationFailure",
    "SchemaError",
    "DuplicateRegistrationError",
    "UnknownTypeError",
    "MissingPathError",
    "EnvMissingException",
    "EnvInvalidException",
    # http
    "HttpException",
    "BadRequestException",
    "ServerErrorException",
]
