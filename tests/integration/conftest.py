from __future__ import annotations

import logging
from typing import Generator

import pytest


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None, None, None]:
    """
    The CLI configures root logging against the runner's captured streams;
    put the previous handlers back once the invocation is over.
    """
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
