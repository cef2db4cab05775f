"""Contract classes and abstract interfaces.

Exported so they can be imported directly from :mod:`fast_constraints`.
"""

from .constraint import Constraint
from .middleware import Middleware
from .route import Route

__all__ = [
    "Constraint",
    "Middleware",
    "Route",
]
