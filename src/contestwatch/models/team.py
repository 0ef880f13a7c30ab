"""Team ranking data models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Team:
    """One contest team at one instant.

    Attributes:
        key: Team identity within the ranking page.
        name: Team name as published (may be a placeholder).
        depot_value: Current depot value in EUR.
        performance: Overall performance in percent.
        performance_rank: Rank by performance.
    """

    key: str
    name: str
    depot_value: float
    performance: float
    performance_rank: int

    @property
    def display_name(self) -> str:
        return self.name

    @property
    def rank(self) -> int:
        return self.performance_rank

    @property
    def score(self) -> float:
        return self.performance


@dataclass(frozen=True)
class TeamRanking:
    """Decoded ranking page plus the upstream total team count."""

    teams: tuple[Team, ...]
    total_elements: int
