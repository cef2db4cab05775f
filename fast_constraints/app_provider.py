import logging
import os
from typing import Mapping, Optional, Type

from pydantic import BaseModel

from fast_constraints.core.registry import ConstraintRegistry
from fast_constraints.utils.env_utils import configure_env, require_env
from fast_constraints.utils.logging import setup_logging
from fast_constraints.utils.registry_loader import load_registry


def boot(*,
    env_file_name: Optional[str] = None,
    log_file_name: Optional[str] = None,
    schema_path: Optional[str] = None,
    schemas: Optional[Mapping[str, Type[BaseModel]]] = None,
    require_schema: bool = False,
) -> Optional[ConstraintRegistry]:
    """
    Sets up the process before any request is served.
    - Loads environment variables
    - Sets up logging
    - Loads and freezes the declarative constraint schema, if one is configured

    Args:
        env_file_name: Explicit dotenv file, see `configure_env`.
        log_file_name: Log file name, see `setup_logging`.
        schema_path: JSON constraint schema. Defaults to `VALIDATION_SCHEMA_PATH`.
        schemas: Type names in the schema file bound to pydantic models.
        require_schema: Raise `EnvMissingException` when no schema path is configured.

    Returns:
        The frozen registry, or None when no schema is configured.

    Raises:
        SchemaError: If the schema file is unreadable or inconsistent. The
            application must not start serving in that case.
    """
    configure_env(env_file_name)
    setup_logging(log_file_name)

    if schema_path is None:
        schema_path = require_env("VALIDATION_SCHEMA_PATH") if require_schema else os.getenv("VALIDATION_SCHEMA_PATH")
    if not schema_path:
        logging.debug("No constraint schema configured")
        return None

    return load_registry(schema_path, schemas=schemas)
