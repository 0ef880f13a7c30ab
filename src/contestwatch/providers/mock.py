"""Mock provider for testing and CI — no token required."""

from __future__ import annotations

from contestwatch.errors import WatcherError
from contestwatch.models.instrument import Instrument
from contestwatch.models.team import Team, TeamRanking
from contestwatch.providers.base import BaseContestProvider


class MockProvider(BaseContestProvider):
    """In-memory provider that returns preloaded data.

    Use ``set_instruments`` and ``set_ranking`` to change what the next
    fetch returns, and ``fail_with`` to make fetches raise.
    """

    def __init__(
        self,
        instruments: list[Instrument] | None = None,
        ranking: TeamRanking | None = None,
    ) -> None:
        self._instruments: list[Instrument] = list(instruments or [])
        self._ranking = ranking or TeamRanking(teams=(), total_elements=0)
        self._error: WatcherError | None = None
        self.calls: list[str] = []

    # --- Pre-load helpers ---

    def set_instruments(self, instruments: list[Instrument]) -> None:
        self._instruments = list(instruments)

    def set_ranking(self, teams: list[Team], total_elements: int | None = None) -> None:
        total = len(teams) if total_elements is None else total_elements
        self._ranking = TeamRanking(teams=tuple(teams), total_elements=total)

    def fail_with(self, error: WatcherError | None) -> None:
        """Raise *error* from every fetch until reset with None."""
        self._error = error

    # --- Provider implementation ---

    def get_instruments(self) -> list[Instrument]:
        self.calls.append("instruments")
        if self._error is not None:
            raise self._error
        return list(self._instruments)

    def get_ranking(self) -> TeamRanking:
        self.calls.append("ranking")
        if self._error is not None:
            raise self._error
        return self._ranking
