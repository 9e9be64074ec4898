# tests/conftest.py

"""Shared pytest fixtures for all tests."""

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from src.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_paths(tmp_path: Path) -> Generator[Path, None, None]:
    """Point every on-disk location at a per-test temp directory."""
    with patch.multiple(
        Settings,
        DATA_DIR=tmp_path / "data",
        DB_PATH=tmp_path / "data" / "test.db",
        RESULTS_DIR=tmp_path / "results",
        CHARTS_DIR=tmp_path / "data" / "charts",
        LOGS_DIR=tmp_path / "logs",
    ):
        yield tmp_path
