"""Contest watcher configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from contestwatch.errors import WatcherError, WatcherErrorCode
from contestwatch.log import LOG_FORMATS, LOG_LEVELS

MARKET_URL = (
    "https://trading.planspiel-boerse.de/stockcontest/services/api/v-ms1"
    "/instrument/getAllInstruments"
)
RANKING_URL = (
    "https://backstage.planspiel-boerse.de/stockcontest/services/api/v-ms6"
    "/ranking/getRanking"
)


class ProviderType(Enum):
    """Supported contest data backends."""

    PLANSPIEL = "planspiel"
    MOCK = "mock"


class PublisherType(Enum):
    """Supported report publishing backends."""

    DISCORD = "discord"
    MEMORY = "memory"


@dataclass(frozen=True)
class WatcherConfig:
    """Configuration for ContestWatcher.

    Windows are given in seconds and converted to lookback offsets by
    dividing by the sampling period, so each window must be a whole
    number of sampling periods that still fits inside the history.

    Attributes:
        provider: Contest data backend.
        publisher: Report publishing backend.
        token: Bearer token for the contest API.
        webhook_url: Discord webhook URL reports are posted to.
        instrument_message_id: Existing message for the movers report.
        rank_change_message_id: Existing message for the rank-change report.
        team_message_id: Existing message for the team report.
        market_url: Instrument universe endpoint.
        ranking_url: Team ranking endpoint.
        ranking_period_detail: ``periodDetail`` of the ranking query.
        ranking_period_year: ``periodYear`` of the ranking query.
        ranking_phase_id: ``phaseId`` of the ranking query.
        sampling_period_seconds: Time between two sampling cycles.
        short_window_seconds: First comparison window (1h).
        long_window_seconds: Second comparison window, also used by the
            rank-change report (2h).
        history_capacity: Number of instrument snapshots kept. The snapshot
            evicted on push is the furthest comparison point, so its age is
            ``history_capacity * sampling_period_seconds``.
        top_movers: Gainers listed in the movers report.
        bottom_movers: Losers listed in the movers report.
        top_rank_changes: Entries listed in the rank-change report.
        team_count: Teams listed at each end of the team report.
        request_timeout_seconds: HTTP timeout for fetch and publish calls.
        log_level: structlog filtering level.
        log_format: "json" or "console" log rendering.
    """

    provider: ProviderType = ProviderType.PLANSPIEL
    publisher: PublisherType = PublisherType.DISCORD
    token: str | None = None
    webhook_url: str | None = None
    instrument_message_id: str | None = None
    rank_change_message_id: str | None = None
    team_message_id: str | None = None

    market_url: str = MARKET_URL
    ranking_url: str = RANKING_URL
    ranking_period_detail: int = 278
    ranking_period_year: int = 2025
    ranking_phase_id: str = "1"

    sampling_period_seconds: int = 15 * 60
    short_window_seconds: int = 60 * 60
    long_window_seconds: int = 2 * 60 * 60
    history_capacity: int = 16

    top_movers: int = 15
    bottom_movers: int = 10
    top_rank_changes: int = 20
    team_count: int = 10

    request_timeout_seconds: float = 30.0
    log_level: str = "info"
    log_format: str = "json"

    def __post_init__(self) -> None:
        if self.sampling_period_seconds <= 0:
            raise _invalid("sampling_period_seconds must be > 0")
        if self.history_capacity <= 0:
            raise _invalid("history_capacity must be > 0")
        for name in ("short_window_seconds", "long_window_seconds"):
            window = getattr(self, name)
            if window <= 0 or window % self.sampling_period_seconds:
                raise _invalid(
                    f"{name}={window} is not a positive multiple of "
                    f"sampling_period_seconds={self.sampling_period_seconds}"
                )
            if window // self.sampling_period_seconds >= self.history_capacity:
                raise _invalid(
                    f"{name}={window} reaches past history_capacity="
                    f"{self.history_capacity} samples"
                )
        for name in ("top_movers", "bottom_movers", "top_rank_changes", "team_count"):
            if getattr(self, name) < 0:
                raise _invalid(f"{name} must be >= 0")
        if self.request_timeout_seconds <= 0:
            raise _invalid("request_timeout_seconds must be > 0")
        if self.log_format not in LOG_FORMATS:
            raise _invalid(f"log_format must be one of {LOG_FORMATS}")
        if self.log_level.lower() not in LOG_LEVELS:
            raise _invalid(f"log_level must be one of {tuple(LOG_LEVELS)}")

    @property
    def short_offset(self) -> int:
        """Lookback offset of the short comparison window."""
        return self.short_window_seconds // self.sampling_period_seconds

    @property
    def long_offset(self) -> int:
        """Lookback offset of the long comparison window."""
        return self.long_window_seconds // self.sampling_period_seconds

    @property
    def eviction_window_seconds(self) -> int:
        """Age of the snapshot that falls out of the history on push."""
        return self.history_capacity * self.sampling_period_seconds

    def ranking_query(self) -> dict[str, object]:
        """Request body for the team ranking endpoint."""
        return {
            "additionalRanking": False,
            "filter": "COUNTRY",
            "name": "",
            "page": 0,
            "pageSize": 2**31 - 1,
            "periodDetail": self.ranking_period_detail,
            "periodType": "TOTAL",
            "periodYear": self.ranking_period_year,
            "phaseId": self.ranking_phase_id,
            "rankingColumn": "PERFORMANCE",
        }


def _invalid(message: str) -> WatcherError:
    return WatcherError(message, code=WatcherErrorCode.CONFIG_INVALID)
