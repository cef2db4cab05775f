"""
fast-constraints - declarative constraint validation for Quart services

- Constraints (Required, NotEmpty, NotBlank, Range, Pattern, Email) bound to fields or parameters
- A build-once ConstraintRegistry, filled in code or from a JSON schema file
- A stateless Validator that reports every violation, not just the first
- One error shape for body, query, path and service validation:
  400 {"violations": [{"fieldName": ..., "message": ...}]}
"""

__version__ = "0.1.0"
__author__ = "Patrik Mojzis"
__email__ = "patrikm53@gmail.com"
__license__ = "MIT"
__url__ = "https://github.com/patrikmojzis/fast-constraints"

from .exceptions import *  # noqa: F401,F403
# core before contracts: contracts.constraint imports core.localization
from .core import *  # noqa: F401,F403
from .contracts import *  # noqa: F401,F403
from .decorators import *  # noqa: F401,F403
from .utils.registry_loader import load_registry, registry_from_mapping  # noqa: F401
from .utils.routing_utils import create_app, register_routes  # noqa: F401
