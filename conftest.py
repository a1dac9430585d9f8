"""Root conftest -- add src/ to sys.path so tests resolve ``tagops`` imports."""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

_src = str(Path(__file__).resolve().parent / "src")
if _src not in sys.path:
    sys.path.insert(0, _src)


@pytest.fixture(autouse=True)
def _reset_root_handlers():
    """Drop handlers installed by ``setup_logging`` so streams do not leak between tests."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
