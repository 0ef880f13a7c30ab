"""Shared fixtures for contestwatch tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure src/ is on the path for editable-style imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from contestwatch.models.instrument import Instrument
from contestwatch.models.snapshot import Snapshot
from contestwatch.models.team import Team, TeamRanking
from contestwatch.providers.mock import MockProvider
from contestwatch.publisher import MemoryPublisher


def make_instrument(
    key: str,
    rel: float,
    *,
    name: str | None = None,
    wkn: str | None = None,
    price: float = 100.0,
    abs_: float = 1.0,
) -> Instrument:
    return Instrument(
        key=key,
        name=name or f"Instrument {key}",
        wkn=wkn or f"WKN{key}",
        price=price,
        performance_abs=abs_,
        performance_rel=rel,
    )


def make_snapshot(values: dict[str, float], taken_at: int | None = None) -> Snapshot:
    """Snapshot of ``{key: performance_rel}`` with default names."""
    return Snapshot.from_records(
        [make_instrument(k, v) for k, v in values.items()], taken_at=taken_at,
    )


def make_team(key: str, depot: float, *, name: str | None = None, rank: int = 1,
              performance: float = 0.0) -> Team:
    return Team(
        key=key,
        name=name or f"Team {key}",
        depot_value=depot,
        performance=performance,
        performance_rank=rank,
    )


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()


@pytest.fixture
def memory_publisher() -> MemoryPublisher:
    return MemoryPublisher()


@pytest.fixture
def sample_instruments() -> list[Instrument]:
    """20 instruments with distinct WKNs, rel performance 10.0 down to -9.0."""
    return [make_instrument(f"{i:03d}", 10.0 - i) for i in range(20)]


@pytest.fixture
def sample_snapshot(sample_instruments) -> Snapshot:
    return Snapshot.from_records(sample_instruments, taken_at=1_700_000_000)


@pytest.fixture
def sample_ranking() -> TeamRanking:
    """12 teams, depot values 100_000 + 1_000 * i."""
    teams = tuple(
        make_team(str(i), 100_000.0 + 1_000 * i, rank=12 - i, performance=float(i))
        for i in range(12)
    )
    return TeamRanking(teams=teams, total_elements=4711)
