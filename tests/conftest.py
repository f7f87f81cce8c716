"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import core_helpers...' and
'import main' work without installing the package, and gives every test a
clean settings singleton.
"""
import sys
from pathlib import Path

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from core_helpers.config.settings import reset_settings  # noqa: E402


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Drop CORE_HELPERS_* variables (a local .env may set them) and reset the cache."""
    monkeypatch.delenv("CORE_HELPERS_LOG_LEVEL", raising=False)
    monkeypatch.delenv("CORE_HELPERS_FROZEN_TODAY", raising=False)
    reset_settings()
    yield
    reset_settings()
