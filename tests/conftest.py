import logging
import os
from collections.abc import Iterator

import pytest

# Measure subprocesses too when running under `coverage run`
if os.getenv("COVERAGE_PROCESS_START"):
    import coverage

    coverage.process_startup()


@pytest.fixture(autouse=True)
def reset_vvlang_logger() -> Iterator[None]:
    """The CLI and REPL change the package logger level; restore it per test."""
    logger = logging.getLogger("vvlang")
    level = logger.level
    yield
    logger.setLevel(level)
