"""
Pytest configuration and fixtures for tapsh tests.
"""
import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
PYTHON_SRC = TESTS_DIR.parent
for entry in (PYTHON_SRC, TESTS_DIR):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

from tapsh.commands import build_registry  # noqa: E402
from tapsh.context import ShellState  # noqa: E402


@pytest.fixture
def state():
    """Shell state that answers every yes/no question with yes."""
    shell = ShellState(confirm=lambda prompt, default: True)
    shell.registry = build_registry()
    return shell
