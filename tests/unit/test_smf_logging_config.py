from __future__ import annotations

import logging
from pathlib import Path

import pytest

from smf_tools import logging_config, parse_bytes

from tests.helpers import make_smf


def _flush_managed_handlers() -> None:
    for handler in logging.getLogger("smf_tools").handlers:
        if getattr(handler, logging_config._HANDLER_TAG, False):  # type: ignore[attr-defined]
            handler.flush()


@pytest.fixture(autouse=True)
def reset_logging():
    logging_config._reset_for_tests()
    try:
        yield
    finally:
        logging_config._reset_for_tests()


def test_logging_creates_file_and_records_warnings(tmp_path, monkeypatch):
    monkeypatch.setenv("SMF_TOOLS_LOG_DIR", str(tmp_path))

    log_path = logging_config.ensure_logging()
    assert log_path == tmp_path / "smf_tools.log"
    assert logging_config.get_file_log_verbosity() == logging_config.LogVerbosity.WARNING
    logging.getLogger("smf_tools.decoding.reader").debug("debug message")
    logging.getLogger("smf_tools.decoding.reader").warning("warning message")
    _flush_managed_handlers()

    contents = log_path.read_text(encoding="utf-8")
    assert "debug message" not in contents
    assert "warning message" in contents


def test_log_file_env_overrides_log_dir(tmp_path, monkeypatch):
    target = tmp_path / "custom" / "decoder.log"
    monkeypatch.setenv("SMF_TOOLS_LOG_DIR", str(tmp_path / "ignored"))
    monkeypatch.setenv("SMF_TOOLS_LOG_FILE", str(target))

    assert logging_config.ensure_logging() == target
    assert target.parent.is_dir()


def test_logging_configuration_is_idempotent(tmp_path, monkeypatch):
    monkeypatch.setenv("SMF_TOOLS_LOG_DIR", str(tmp_path))

    first_path = logging_config.ensure_logging()
    second_path = logging_config.ensure_logging()

    assert first_path == second_path
    managed_handlers = [
        handler
        for handler in logging.getLogger("smf_tools").handlers
        if getattr(handler, logging_config._HANDLER_TAG, False)  # type: ignore[attr-defined]
    ]

    # Only the file handler should be installed during tests (stderr is not a tty).
    assert len(managed_handlers) == 1
    assert isinstance(managed_handlers[0], logging.FileHandler)
    assert Path(managed_handlers[0].baseFilename) == first_path


def test_verbose_logging_records_decoder_debug_output(tmp_path, monkeypatch):
    monkeypatch.setenv("SMF_TOOLS_LOG_DIR", str(tmp_path))

    log_path = logging_config.ensure_logging()
    logging_config.set_file_log_verbosity("verbose")
    track = bytes([0x00, 0xF0, 0x02, 0x7E, 0xF7, 0x00, 0xFF, 0x2F, 0x00])
    parse_bytes(make_smf(track))
    _flush_managed_handlers()

    contents = log_path.read_text(encoding="utf-8")
    assert "skipped 2-byte sysex event" in contents
    assert "Track 0: decoded 2 events" in contents
    assert logging_config.get_file_log_verbosity() == logging_config.LogVerbosity.VERBOSE


def test_disabling_file_logging_suppresses_output(tmp_path, monkeypatch):
    monkeypatch.setenv("SMF_TOOLS_LOG_DIR", str(tmp_path))

    log_path = logging_config.ensure_logging()
    logging_config.set_file_log_verbosity(logging_config.LogVerbosity.DISABLED)
    _flush_managed_handlers()
    initial_size = log_path.stat().st_size

    logging.getLogger("smf_tools.decoding").critical("critical message")
    _flush_managed_handlers()

    assert log_path.stat().st_size == initial_size


def test_unknown_verbosity_is_rejected():
    with pytest.raises(ValueError, match="Unsupported log verbosity"):
        logging_config.set_file_log_verbosity("chatty")
