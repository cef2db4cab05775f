from typing import TYPE_CHECKING, Any, Optional

from fast_constraints.exceptions.http_exceptions import HttpException
from fast_constraints.utils.serialisation import get_exception_error_type, describe_type_id

if TYPE_CHECKING:
    from fast_constraints.core.outcome import ValidationOutcome


class AppException(Exception):
    def __init__(self,
        message: str,
        *,
        http_status_code: Optional[int] = None,
        error_type: Optional[str] = None,
        data: Optional[dict] = None
    ):
        """
        Universal exception, which can be converted to a HTTP response, if caught by the handle_exceptions_middleware.

        Args:
            message: The error message.
            http_status_code: The HTTP status code to return.
            error_type: The error type to return (if not provided, it will be inferred from the exception class name).
            data: The data to return.
        """
        self.message = message
        self.http_status_code = http_status_code
        self.error_type = error_type or get_exception_error_type(self)
        self.data = data
        super().__init__(message)

    def to_http_exception(self):
        return HttpException(status_code=self.http_status_code, error_type=self.error_type, message=self.message, data=self.data)

    def to_response(self):
        return self.to_http_exception().to_response()


class ValidationFailure(AppException):
    """
    One or more constraints did not hold for user supplied input.

    This is the only validation error kind, whether the input came from a request
    body, a query string, a path parameter or a service call. It always renders
    as HTTP 400 with the full list of violations.
    """

    def __init__(self, outcome: 'ValidationOutcome', *, source: Optional[str] = None):
        self.outcome = outcome
        self.source = source
        super().__init__(
            f"Validation failed with {len(outcome)} violation(s)",
            http_status_code=400,
        )

    def to_response(self):
        from fast_constraints.core.responder import ErrorResponder

        return ErrorResponder().to_response(self.outcome)


class SchemaError(AppException):
    """
    Constraint configuration is inconsistent with the data it guards.

    A programming error, never a user input error: it is not recoverable by the
    client and must not be rendered as a validation failure.
    """

    def __init__(self, message: str):
        super().__init__(message, http_status_code=500)


class DuplicateRegistrationError(SchemaError):
    def __init__(self, type_id: Any):
        self.type_id = type_id
        super().__init__(f"Constraints for `{describe_type_id(type_id)}` are already registered")


class UnknownTypeError(SchemaError):
    def __init__(self, type_id: Any):
        self.type_id = type_id
        super().__init__(f"No constraints registered for `{describe_type_id(type_id)}`")


class MissingPathError(SchemaError):
    def __init__(self, path: str, instance: Any = None):
        self.path = path
        owner = type(instance).__name__ if instance is not None else "input"
        super().__init__(f"Path `{path}` does not resolve on {owner}")


class EnvMissingException(ValueError):
    def __init__(self, env_name: str):
        super().__init__(f"[ENV MISSING] Missing required environment variable: `{env_name}`")


class EnvInvalidException(ValueError):
    def __init__(self, env_name: str, value: str = None, supported_values: list[str] = None):
        message = f"[ENV INVALID] Invalid environment variable: `{env_name}`"
        if value:
            message += f" (value: `{value}`) "
        if supported_values:
            message += f" (supported values: {', '.join(supported_values)})"
        super().__init__(message)
