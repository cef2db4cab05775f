import logging
import os
from typing import Any, Callable, Awaitable

from fast_constraints.contracts.middleware import Middleware
from fast_constraints.exceptions import HttpException, ServerErrorException, SchemaError, ValidationFailure
from fast_constraints.exceptions.common_exceptions import AppException


class HandleExceptionsMiddleware(Middleware):
    """
    Turns exceptions raised by a handler into HTTP responses.

    - ValidationFailure: 400 with the violation list (never logged as an error)
    - HttpException: its own status and body
    - SchemaError and anything else: logged, 500 with no internals exposed
    """

    async def handle(self, next_handler: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        try:
            return await next_handler(*args, **kwargs)
        except ValidationFailure as e:
            logging.info(f"Rejected {e.source or 'input'} with {len(e.outcome)} violation(s)")
            return e.to_response()
        except HttpException as e:
            return e.to_response()
        except SchemaError as e:
            logging.exception("Constraint schema error while handling request", exc_info=e)
            if os.getenv("ENV") == "debug":
                raise e

            return ServerErrorException(error_type="schema_error").to_response()
        except AppException as e:
            logging.exception("Application exception while handling request", exc_info=e)
            if os.getenv("ENV") == "debug":
                raise e

            return e.to_response()
        except Exception as e:
            logging.exception("Unhandled exception while handling request", exc_info=e)
            if os.getenv("ENV") == "debug":
                raise e

            return ServerErrorException().to_response()
