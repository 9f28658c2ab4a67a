"""Tests for structured logging configuration."""

from __future__ import annotations

import json
import logging
import subprocess
import sys
import textwrap
from typing import TYPE_CHECKING

import pytest

from hookweave.observability import close_file_logging, configure_logging, get_logger

if TYPE_CHECKING:
    from pathlib import Path


def test_configure_logging_sets_level_warning() -> None:
    """Default verbosity (0) sets WARNING level."""
    configure_logging(verbosity=0)

    root_logger = logging.getLogger()
    assert root_logger.level == logging.WARNING


def test_configure_logging_verbose_sets_debug_root() -> None:
    """verbosity=1 opens the root logger; the console handler filters."""
    configure_logging(verbosity=1)

    root_logger = logging.getLogger()
    assert root_logger.level == logging.DEBUG


def test_get_logger_returns_bound_logger() -> None:
    """get_logger returns a structlog logger with expected methods."""
    logger = get_logger(__name__)

    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")


def test_get_logger_leaves_host_logging_alone() -> None:
    """get_logger does not replace the host's root handlers or level."""
    root_logger = logging.getLogger()
    host_handler = logging.StreamHandler()
    saved_handlers = root_logger.handlers[:]
    saved_level = root_logger.level
    root_logger.handlers = [host_handler]
    root_logger.setLevel(logging.INFO)
    try:
        get_logger("host.module").debug("ignored_event")

        assert root_logger.handlers == [host_handler]
        assert root_logger.level == logging.INFO
    finally:
        root_logger.handlers = saved_handlers
        root_logger.setLevel(saved_level)


def test_import_keeps_host_root_handler() -> None:
    """Importing hookweave in a fresh interpreter keeps existing root handlers."""
    code = textwrap.dedent(
        """
        import logging

        host_handler = logging.StreamHandler()
        root = logging.getLogger()
        root.addHandler(host_handler)
        root.setLevel(logging.INFO)

        import hookweave.story  # noqa: F401

        assert host_handler in root.handlers, root.handlers
        assert root.level == logging.INFO, root.level
        """
    )

    result = subprocess.run(
        [sys.executable, "-c", code], capture_output=True, text=True, check=False
    )

    assert result.returncode == 0, result.stderr


def test_configure_logging_requires_log_dir_for_file_logging() -> None:
    """log_to_file=True without log_dir raises ValueError."""
    with pytest.raises(ValueError, match="log_dir is required"):
        configure_logging(verbosity=0, log_to_file=True, log_dir=None)


def test_configure_logging_without_file_logging(tmp_path: Path) -> None:
    """Without file logging the directory is not created."""
    configure_logging(verbosity=0, log_to_file=False, log_dir=tmp_path / "logs")

    assert not (tmp_path / "logs").exists()


def test_close_file_logging_clears_handler(tmp_path: Path) -> None:
    """close_file_logging closes handler and clears reference."""
    import hookweave.observability.logging as log_module

    configure_logging(verbosity=0, log_to_file=True, log_dir=tmp_path)
    assert log_module._file_handler is not None

    close_file_logging()

    assert log_module._file_handler is None


def test_jsonl_file_handler_writes_structlog_context(tmp_path: Path) -> None:
    """JSONLFileHandler extracts structlog context into JSONL."""
    configure_logging(verbosity=2, log_to_file=True, log_dir=tmp_path)

    logger = get_logger("test.context")
    logger.info("test_event", key1="value1", key2=42)

    close_file_logging()

    log_file = tmp_path / "events.jsonl"
    assert log_file.exists()

    found = False
    with log_file.open() as f:
        for line in f:
            entry = json.loads(line)
            if entry.get("message") == "test_event":
                found = True
                assert entry["key1"] == "value1"
                assert entry["key2"] == 42
                assert entry["level"] == "INFO"
                break

    assert found, "Log entry with structlog context not found in JSONL"
