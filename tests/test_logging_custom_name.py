from __future__ import annotations

import logging

import pytest

from fast_constraints import EnvInvalidException
from fast_constraints.utils.logging import get_log_file_path, setup_logging


def test_logging_uses_custom_file_name(tmp_path, monkeypatch, isolated_logging):
    monkeypatch.delenv("LOG_FILE_NAME", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    setup_logging("module_x.log", log_dir=tmp_path / "log")

    path = get_log_file_path()
    assert path is not None
    assert path.name == "module_x.log"
    assert path.parent.name == "log"

    logging.warning("written to the custom file")
    for handler in logging.getLogger().handlers:
        handler.flush()
    assert "written to the custom file" in path.read_text()


def test_log_file_name_from_env(tmp_path, monkeypatch, isolated_logging):
    monkeypatch.setenv("LOG_FILE_NAME", "from_env.log")
    monkeypatch.delenv("LOG_LEVEL", raising=False)

    setup_logging(log_dir=tmp_path)

    assert get_log_file_path() == tmp_path / "from_env.log"


def test_invalid_log_level_is_rejected(tmp_path, monkeypatch, isolated_logging):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")

    with pytest.raises(EnvInvalidException):
        setup_logging("app.log", log_dir=tmp_path)
