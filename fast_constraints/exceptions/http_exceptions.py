from typing import Any, Optional

from quart import jsonify

from fast_constraints.utils.serialisation import serialise, get_exception_error_type


class HttpException(Exception):
    """
    Error rendered as `{"error_type", "message", "data"}` with its own status.

    Used for failures that are not constraint violations, e.g. a body that is
    not a JSON object or an internal error hidden from the client.
    """

    def __init__(self, status_code: int, *, error_type: Optional[str] = None,
                 message: Optional[str] = None, data: Any = None):
        super().__init__(message)
        self._status_code = status_code
        self._error_type = error_type or get_exception_error_type(self)
        self._message = message
        self._data = data

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def error_type(self) -> str:
        return self._error_type

    @property
    def message(self) -> Optional[str]:
        return self._message

    def dict(self) -> dict:
        return {
            "error_type": self._error_type,
            "message": self._message,
            "data": self._data,
        }

    def to_response(self):
        return jsonify(serialise(self.dict())), self._status_code


class BadRequestException(HttpException):
    def __init__(self, **kwargs):
        super().__init__(400, **kwargs)


class ServerErrorException(HttpException):
    def __init__(self, **kwargs):
        super().__init__(500, **kwargs)
