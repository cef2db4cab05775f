from abc import ABC, abstractmethod
from functools import wraps
from typing import Callable, Any, Awaitable


class Middleware(ABC):
    """
    Wraps an async route handler.

    Instances are applied as decorators; `handle` receives the next handler
    in the chain together with the route arguments (path parameters).
    """

    @abstractmethod
    async def handle(self, next_handler: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        """Run before and/or after `next_handler` and return the response."""
        pass

    def __call__(self, func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            return await self.handle(func, *args, **kwargs)
        return wrapper
