"""Abstract base class for contest data providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from contestwatch.models.instrument import Instrument
from contestwatch.models.team import TeamRanking


class BaseContestProvider(ABC):
    """Abstract base for all contest data providers.

    Subclasses implement both streams: ``get_instruments`` and
    ``get_ranking``.

    Every fetch either returns fully decoded data or raises
    ``WatcherError``; individual malformed records are dropped, never
    returned half-decoded.
    """

    @abstractmethod
    def get_instruments(self) -> list[Instrument]:
        """Fetch the current instrument universe, in upstream order."""
        ...

    @abstractmethod
    def get_ranking(self) -> TeamRanking:
        """Fetch the current team ranking."""
        ...
