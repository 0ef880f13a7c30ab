"""contestwatch — stock-contest watcher with rolling snapshot history.

Samples the Planspiel Börse instrument universe and team ranking on a
fixed interval, keeps a bounded history of instrument snapshots and
publishes movers, rank-change and team reports to a Discord webhook.

Quick start::

    from contestwatch import create_watcher_from_env
    watcher = create_watcher_from_env()
    watcher.run_forever()
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from contestwatch.config import ProviderType, PublisherType, WatcherConfig
from contestwatch.errors import WatcherError, WatcherErrorCode
from contestwatch.history import HistoryBuffer
from contestwatch.models.instrument import Instrument
from contestwatch.models.snapshot import Snapshot
from contestwatch.models.team import Team, TeamRanking
from contestwatch.reports import (
    Comparison,
    RankChange,
    build_movers_report,
    build_rank_change_report,
    build_team_report,
    compute_rank_changes,
)
from contestwatch.watcher import ContestWatcher

__version__ = "0.1.0"

__all__ = [
    # Watcher
    "ContestWatcher",
    "create_config_from_env",
    "create_watcher_from_env",
    # Config
    "WatcherConfig",
    "ProviderType",
    "PublisherType",
    # Errors
    "WatcherError",
    "WatcherErrorCode",
    # History
    "HistoryBuffer",
    # Models
    "Instrument",
    "Snapshot",
    "Team",
    "TeamRanking",
    # Reports
    "Comparison",
    "RankChange",
    "build_movers_report",
    "build_rank_change_report",
    "build_team_report",
    "compute_rank_changes",
]


def create_config_from_env() -> WatcherConfig:
    """Read configuration from env vars, after loading ``.env`` if present.

    Environment variables:
        PSB_TOKEN: Bearer token for the contest API.
        DISCORD_WEBHOOK: Discord webhook URL.
        DISCORD_INSTRUMENT_MSG_ID: Existing movers report message.
        DISCORD_INSTRUMENT_PERF_DIFF_MSG_ID: Existing rank-change report message.
        DISCORD_TEAMS_MSG_ID: Existing team report message.
        CONTESTWATCH_PROVIDER: "planspiel" or "mock" (default: "planspiel").
        CONTESTWATCH_PUBLISHER: "discord" or "memory" (default: "discord").
        CONTESTWATCH_INTERVAL: Sampling period in seconds (default: 900).
        CONTESTWATCH_SHORT_WINDOW: First comparison window in seconds (default: 3600).
        CONTESTWATCH_LONG_WINDOW: Second comparison window in seconds (default: 7200).
        CONTESTWATCH_HISTORY_CAPACITY: Snapshots kept (default: 16).
        CONTESTWATCH_LOG_LEVEL: Log level (default: "info").
        CONTESTWATCH_LOG_FORMAT: "json" or "console" (default: "json").
        PSB_RANKING_PERIOD_DETAIL: Ranking ``periodDetail`` (default: 278).
        PSB_RANKING_PERIOD_YEAR: Ranking ``periodYear`` (default: 2025).
        PSB_RANKING_PHASE_ID: Ranking ``phaseId`` (default: "1").
    """
    load_dotenv()

    try:
        return WatcherConfig(
            provider=ProviderType(os.getenv("CONTESTWATCH_PROVIDER", "planspiel").strip()),
            publisher=PublisherType(os.getenv("CONTESTWATCH_PUBLISHER", "discord").strip()),
            token=os.getenv("PSB_TOKEN"),
            webhook_url=os.getenv("DISCORD_WEBHOOK"),
            instrument_message_id=os.getenv("DISCORD_INSTRUMENT_MSG_ID") or None,
            rank_change_message_id=os.getenv("DISCORD_INSTRUMENT_PERF_DIFF_MSG_ID") or None,
            team_message_id=os.getenv("DISCORD_TEAMS_MSG_ID") or None,
            ranking_period_detail=int(os.getenv("PSB_RANKING_PERIOD_DETAIL", "278")),
            ranking_period_year=int(os.getenv("PSB_RANKING_PERIOD_YEAR", "2025")),
            ranking_phase_id=os.getenv("PSB_RANKING_PHASE_ID", "1"),
            sampling_period_seconds=int(os.getenv("CONTESTWATCH_INTERVAL", "900")),
            short_window_seconds=int(os.getenv("CONTESTWATCH_SHORT_WINDOW", "3600")),
            long_window_seconds=int(os.getenv("CONTESTWATCH_LONG_WINDOW", "7200")),
            history_capacity=int(os.getenv("CONTESTWATCH_HISTORY_CAPACITY", "16")),
            log_level=os.getenv("CONTESTWATCH_LOG_LEVEL", "info"),
            log_format=os.getenv("CONTESTWATCH_LOG_FORMAT", "json").strip(),
        )
    except ValueError as exc:
        raise WatcherError(
            f"Invalid configuration: {exc}",
            code=WatcherErrorCode.CONFIG_INVALID,
        ) from exc


def create_watcher_from_env() -> ContestWatcher:
    """Zero-config factory — builds a ContestWatcher from env vars."""
    return ContestWatcher(create_config_from_env())
