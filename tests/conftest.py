"""Pytest configuration and fixtures for quiz-data-seed."""

from __future__ import annotations

import json
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import mongomock
import pytest

from scripts.seed_mongo import SeedingConfig

# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def sample_data_path(project_root: Path) -> Path:
    """Return the bundled sample source file."""
    return project_root / "data" / "sample-data.json"


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_source() -> dict[str, Any]:
    """Return a nested source document with one ineligible subject."""
    return {
        "Containers": {
            "Docker Commands": {
                "keywords": ["docker run", "docker ps"],
                "style_modifiers": ["command syntax"],
            },
            "Kubernetes": {
                "keywords": ["pod", "deployment"],
            },
        },
        "Programming": {
            "Python": {
                "keywords": ["generator", "decorator"],
                "style_modifiers": ["code snippet", "output prediction"],
            },
            "Drafts": {
                "notes": "keywords still to be written",
            },
        },
    }


# ============================================================================
# Temp File Fixtures
# ============================================================================


@pytest.fixture
def write_source(tmp_path: Path) -> Callable[[Any], Path]:
    """Factory fixture writing data (or raw text) to a temp source file."""
    def _write(data: Any, name: str = "sample-data.json") -> Path:
        file_path = tmp_path / name
        if isinstance(data, str):
            file_path.write_text(data, encoding="utf-8")
        else:
            file_path.write_text(json.dumps(data), encoding="utf-8")
        return file_path
    return _write


@pytest.fixture
def source_file(write_source: Callable[[Any], Path], sample_source: dict[str, Any]) -> Path:
    """Write the sample source document to a temp file."""
    return write_source(sample_source)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def mongo_client() -> Generator[mongomock.MongoClient, None, None]:
    """In-memory MongoDB client."""
    client = mongomock.MongoClient()
    yield client
    client.close()


@pytest.fixture
def seeding_config(source_file: Path) -> SeedingConfig:
    """Return seeding config pointing at the temp source file."""
    return SeedingConfig(source_path=source_file, database="quizdb_test")


# ============================================================================
# Markers
# ============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (deselect with '-m \"not integration\"')",
    )
    config.addinivalue_line(
        "markers",
        "requires_mongo: marks tests requiring a MongoDB connection",
    )
