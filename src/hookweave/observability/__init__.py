"""Observability module for hookweave.

Provides structured logging with a rich console sink and an optional JSONL file sink.
"""

from hookweave.observability.logging import (
    close_file_logging,
    configure_logging,
    get_logger,
    get_logs_dir,
)

__all__ = [
    "close_file_logging",
    "configure_logging",
    "get_logger",
    "get_logs_dir",
]
