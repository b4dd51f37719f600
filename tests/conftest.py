"""
Pytest configuration and shared fixtures.

This module provides:
- Sample pain-map data for unit tests
- Deterministic text generator stubs
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import pytest

from painmap.core.stats_engine import PainEntry

# =============================================================================
# Generator Stubs
# =============================================================================


@dataclass(slots=True)
class SequenceGenerator:
    """Return (or raise) configured outcomes one call at a time."""

    outcomes: list[Any]
    prompts: list[str] = field(default_factory=list)

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.outcomes:
            msg = "No more outcomes configured"
            raise AssertionError(msg)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def sequence_generator() -> type[SequenceGenerator]:
    return SequenceGenerator


# =============================================================================
# Sample Data Fixtures
# =============================================================================


def _at(day: int, hour: int = 9) -> datetime:
    return datetime(2024, 1, day, hour, tzinfo=UTC)


@pytest.fixture
def sample_pain_maps() -> dict[str, list[PainEntry]]:
    """Two periods of logged entries across a handful of regions."""
    return {
        "Last Week": [
            PainEntry(region="Lower Back", severity=7, timestamp=_at(8)),
            PainEntry(region="Lower Back", severity=6, timestamp=_at(9)),
            PainEntry(region="Lower Back", severity=8, timestamp=_at(10)),
            PainEntry(region="Lower Back", severity=5, timestamp=_at(11)),
            PainEntry(region="Lower Back", severity=8, timestamp=_at(12)),
            PainEntry(region="Lower Back", severity=8, timestamp=_at(13)),
            PainEntry(region="Lower Back", severity=9, timestamp=_at(14)),
            PainEntry(region="Neck", severity=4, timestamp=_at(10, 18)),
            PainEntry(region="Neck", severity=3, timestamp=_at(12, 18)),
            PainEntry(region="Right Knee", severity=2, timestamp=_at(13, 7)),
        ],
        "Last Month": [
            PainEntry(region="Lower Back", severity=5, timestamp=_at(2)),
            PainEntry(region="Neck", severity=6, timestamp=_at(3)),
        ],
    }


# =============================================================================
# Test Markers
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "unit: Unit tests (fast, no external dependencies)",
    )
    config.addinivalue_line(
        "markers",
        "integration: Integration tests (require a live LLM endpoint)",
    )
    config.addinivalue_line(
        "markers",
        "slow: Slow tests",
    )
    config.addinivalue_line(
        "markers",
        "external: Tests that call external APIs",
    )
