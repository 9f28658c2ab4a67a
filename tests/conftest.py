"""Pytest configuration and shared fixtures."""

import os

import pytest


@pytest.fixture(autouse=True, scope="session")
def isolate_engine_env() -> None:
    """Keep developer overrides out of test runs.

    Set HOOKWEAVE_TEST_KEEP_ENV=true to run with the caller's overrides.
    """
    if os.environ.get("HOOKWEAVE_TEST_KEEP_ENV", "").lower() != "true":
        for name in ("HOOKWEAVE_MAX_EMBED_DEPTH", "HOOKWEAVE_STRICT_CONTEXT", "HOOKWEAVE_LOG_DIR"):
            os.environ.pop(name, None)
