import logging
import os
import sys
from pathlib import Path

from fast_constraints.exceptions import EnvInvalidException

_LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"]

_logging_configured = False
_log_file_path: Path | None = None


def setup_logging(log_file_name: str | None = None, log_dir: str | Path | None = None):
    """
    Setup logging for the application.

    Writes to `<log_dir>/<log_file_name>` (defaults: `./log`, `LOG_FILE_NAME`
    or `app.log`) at `LOG_LEVEL` (default DEBUG), adds a console handler when
    `ENV=debug`, and logs uncaught exceptions.

    Raises:
        EnvInvalidException: If `LOG_LEVEL` is not a logging level name.
    """
    global _logging_configured, _log_file_path

    directory = Path(log_dir) if log_dir is not None else Path(os.getcwd()) / "log"
    file_name = log_file_name if log_file_name else os.getenv('LOG_FILE_NAME', 'app.log')
    log_file = directory / file_name

    if _logging_configured and _log_file_path == log_file:
        return

    level = os.getenv('LOG_LEVEL', 'DEBUG').upper()
    if level not in _LOG_LEVELS:
        raise EnvInvalidException("LOG_LEVEL", level, _LOG_LEVELS)

    directory.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    file_handler = logging.FileHandler(str(log_file), mode='a')
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    root_logger.addHandler(file_handler)

    if os.getenv('ENV') == 'debug':
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter('%(levelname)s - %(name)s - %(message)s'))
        root_logger.addHandler(console_handler)

    def log_uncaught_exception(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        logging.critical(
            "Uncaught exception crashed the application",
            exc_info=(exc_type, exc_value, exc_traceback)
        )

    sys.excepthook = log_uncaught_exception

    _log_file_path = log_file
    _logging_configured = True
    logging.info("Logging configured")


def get_log_file_path() -> Path | None:
    return _log_file_path
