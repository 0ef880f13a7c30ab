"""Contest data models."""

from contestwatch.models.instrument import Instrument
from contestwatch.models.snapshot import Snapshot
from contestwatch.models.team import Team, TeamRanking

__all__ = [
    "Instrument",
    "Snapshot",
    "Team",
    "TeamRanking",
]
