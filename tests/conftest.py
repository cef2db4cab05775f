"""
Pytest configuration and shared fixtures for fast-constraints tests.
"""

import pytest
from faker import Faker

import fast_constraints.core.localization as localization

fake = Faker()


@pytest.fixture
def sample_data():
    """Provide sample data for tests."""
    return {
        "name": fake.name(),
        "email": fake.email(),
        "company": fake.company(),
        "ip_address": fake.ipv4(),
        "number": fake.random_int(min=1, max=10),
        "account": fake.iban(),
    }


@pytest.fixture(autouse=True)
def default_locale(tmp_path):
    """Run every test with the built-in English messages."""
    previous_path = localization._LOCALE_PATH
    localization.set_locale_path(str(tmp_path / "no-lang"))
    localization.set_locale("en")
    yield
    localization.set_locale_path(previous_path)
    localization.set_locale("en")


@pytest.fixture
def isolated_logging(monkeypatch):
    """Let a test configure logging without leaking handlers into the session."""
    import logging
    import sys

    import fast_constraints.utils.logging as logging_utils

    root_logger = logging.getLogger()
    previous_handlers = list(root_logger.handlers)
    previous_level = root_logger.level
    monkeypatch.setattr(logging_utils, "_logging_configured", False)
    monkeypatch.setattr(logging_utils, "_log_file_path", None)
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    yield
    for handler in root_logger.handlers:
        if handler not in previous_handlers:
            handler.close()
    root_logger.handlers[:] = previous_handlers
    root_logger.setLevel(previous_level)
