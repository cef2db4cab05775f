import logging
from typing import TYPE_CHECKING, Callable, List, Optional, Type

from quart import Quart

from fast_constraints.contracts.middleware import Middleware
from fast_constraints.core.api import REGISTRY_EXTENSION_KEY
from fast_constraints.core.middlewares.constraint_validation_middleware import ConstraintValidationMiddleware
from fast_constraints.core.middlewares.handle_exceptions_middleware import HandleExceptionsMiddleware
from fast_constraints.core.registry import ConstraintRegistry

if TYPE_CHECKING:
    from fast_constraints.contracts.route import Route


def apply_middleware_chain(handler: Callable, middlewares: list[Middleware | Type[Middleware] | Callable]) -> Callable:
    """Wrap `handler` so that `middlewares` run first-to-last around it."""
    if not middlewares:
        return handler

    wrapped_handler = handler
    for middleware in reversed(middlewares):
        resolved_middleware: Callable
        if isinstance(middleware, type) and issubclass(middleware, Middleware):
            resolved_middleware = middleware()  # type: ignore[call-arg]
        else:
            resolved_middleware = middleware  # type: ignore[assignment]

        if isinstance(resolved_middleware, Middleware) or callable(resolved_middleware):
            wrapped_handler = resolved_middleware(wrapped_handler)  # type: ignore[misc]
        else:
            raise ValueError("Middleware must be a Middleware subclass/instance or a callable")

    return wrapped_handler


def install_registry(app: Quart, registry: ConstraintRegistry) -> ConstraintRegistry:
    """
    Attach a constraint registry to the app, freezing it first.

    Requests are only served once every constraint is known.
    """
    registry.freeze()
    app.extensions[REGISTRY_EXTENSION_KEY] = registry
    return registry


def register_routes(app: Quart, routes: List['Route'], registry: Optional[ConstraintRegistry] = None) -> None:
    """Register routes with the Quart application."""
    if registry is not None:
        install_registry(app, registry)
    elif REGISTRY_EXTENSION_KEY not in app.extensions:
        install_registry(app, ConstraintRegistry())

    flattened_routes = []
    for route in routes:
        flattened_routes.extend(route.flatten())

    for route in flattened_routes:
        if route.handler is None:
            continue

        # 1) HandleExceptionsMiddleware (first, renders ValidationFailure as 400)
        # 2) ConstraintValidationMiddleware
        # 3) Route-specific middlewares
        all_middlewares = [HandleExceptionsMiddleware, ConstraintValidationMiddleware]
        if route.middlewares:
            all_middlewares.extend(route.middlewares)

        wrapped_handler = apply_middleware_chain(route.handler, all_middlewares)

        endpoint_name = f"{wrapped_handler.__name__}:{','.join(sorted(route.methods or []))}:{route.path}"
        app.add_url_rule(
            rule=route.path,
            endpoint=endpoint_name,
            view_func=wrapped_handler,
            methods=route.methods
        )
        logging.debug(f"Registered route {','.join(route.methods or [])} {route.path}")


def create_app(routes: List['Route'], registry: ConstraintRegistry, *, import_name: str = "fast_constraints") -> Quart:
    """Create a Quart application serving `routes` with constraint validation."""
    app = Quart(import_name)
    register_routes(app, routes, registry)
    return app
