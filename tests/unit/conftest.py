"""
Pytest configuration for unit tests.

Provides option fixtures and a patched subprocess layer so no test ever
spawns a real indexer service.
"""
from unittest.mock import MagicMock, patch

import pytest

from indexer_launcher.core.models import StartOptions


@pytest.fixture
def default_options():
    """StartOptions with every field left at its default."""
    return StartOptions()


@pytest.fixture
def mock_popen():
    """Patch subprocess.Popen inside the launcher; yields the mock class."""
    with patch("indexer_launcher.core.launcher.subprocess.Popen") as popen:
        proc = MagicMock()
        proc.pid = 4242
        proc.communicate.return_value = (b"5151\n", b"")
        popen.return_value = proc
        yield popen


@pytest.fixture
def mock_sleep():
    with patch("indexer_launcher.core.launcher.time.sleep") as sleep:
        yield sleep
