"""
Pytest configuration and common fixtures for geokit tests.

All fixtures follow camelCase naming convention.
"""

import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

DATA_DIR = Path(__file__).parent / "geocode" / "data"


@pytest.fixture
def tempDir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path: Directory removed after the test
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def loadFixture() -> Callable[[str], bytes]:
    """
    Provide a loader for JSON payloads under tests/geocode/data.

    Returns:
        Callable[[str], bytes]: Maps a file name to its raw bytes
    """

    def _load(name: str) -> bytes:
        return (DATA_DIR / name).read_bytes()

    return _load
