"""Pytest fixtures for content registry tests.

Common fixtures for building a registry with a controllable block height
and an isolated event log.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest
from dotenv import load_dotenv

from src.config import reset_config
from src.registry import BlockHeight, EventLogger, RegistryService

# Load environment variables from .env before any tests run
load_dotenv()


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "scenario: end-to-end registry scenario spanning several operations",
    )


@pytest.fixture(autouse=True)
def fresh_config() -> Iterator[None]:
    """Make sure no test sees config loaded or overridden by another."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def height() -> BlockHeight:
    """A block height starting at 0 that tests advance explicitly."""
    return BlockHeight()


@pytest.fixture
def registry(height: BlockHeight) -> RegistryService:
    """An empty registry with explicit settings (no config file needed)."""
    return RegistryService(
        root_authority="SYSTEM",
        height_source=height,
        validation_mode="strict",
    )


@pytest.fixture
def event_logger(tmp_path: Path) -> EventLogger:
    """Event logger writing into the test's temp directory."""
    return EventLogger(tmp_path / "events.jsonl")


@pytest.fixture
def logged_registry(height: BlockHeight, event_logger: EventLogger) -> RegistryService:
    """A registry that records events to the temp event log."""
    return RegistryService(
        root_authority="SYSTEM",
        height_source=height,
        event_logger=event_logger,
        validation_mode="strict",
    )


@pytest.fixture
def doc_a(registry: RegistryService) -> int:
    """Content id of a record created by alice."""
    result = registry.create_record("alice", "Doc A", 100, "s", ["x"])
    assert result["success"] is True
    return result["content_id"]
