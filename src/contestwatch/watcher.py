"""ContestWatcher — sampling cycle: fetch -> history -> reports -> publish."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from contestwatch.config import ProviderType, PublisherType, WatcherConfig
from contestwatch.errors import WatcherError
from contestwatch.history import HistoryBuffer
from contestwatch.log import get_logger
from contestwatch.models.snapshot import Snapshot
from contestwatch.providers import create_provider
from contestwatch.providers.base import BaseContestProvider
from contestwatch.publisher import BasePublisher, DiscordWebhookPublisher, MemoryPublisher
from contestwatch.reports import (
    Comparison,
    build_movers_report,
    build_rank_change_report,
    build_team_report,
    format_window,
)

_log = get_logger(component="watcher")

MOVERS_REPORT = "movers"
RANK_CHANGE_REPORT = "rank_change"
TEAM_REPORT = "teams"


def _epoch_seconds() -> int:
    return int(time.time())


class ContestWatcher:
    """Runs sampling cycles for the instrument and team streams.

    One cycle fetches both streams, pushes the instrument snapshot into
    the history, renders the reports and publishes each into its own
    message. A failed fetch skips that stream for the cycle without
    touching the history; a failed publish drops that report. Neither
    escapes the cycle.

    Usage::

        from contestwatch import create_watcher_from_env
        watcher = create_watcher_from_env()
        watcher.run_forever()
    """

    def __init__(
        self,
        config: WatcherConfig,
        provider: BaseContestProvider | None = None,
        publisher: BasePublisher | None = None,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self.config = config

        if provider is None:
            kwargs: dict[str, Any] = {}
            if config.provider == ProviderType.PLANSPIEL:
                kwargs["token"] = config.token
                kwargs["market_url"] = config.market_url
                kwargs["ranking_url"] = config.ranking_url
                kwargs["ranking_query"] = config.ranking_query()
                kwargs["timeout"] = config.request_timeout_seconds
            provider = create_provider(config.provider, **kwargs)
        self.provider = provider

        if publisher is None:
            if config.publisher == PublisherType.DISCORD:
                publisher = DiscordWebhookPublisher(
                    config.webhook_url, timeout=config.request_timeout_seconds,
                )
            else:
                publisher = MemoryPublisher()
        self.publisher = publisher

        self.clock = clock or _epoch_seconds
        self.history = HistoryBuffer(config.history_capacity)
        self.message_ids: dict[str, str | None] = {
            MOVERS_REPORT: config.instrument_message_id,
            RANK_CHANGE_REPORT: config.rank_change_message_id,
            TEAM_REPORT: config.team_message_id,
        }

    # ------------------------------------------------------------ instruments

    def check_instruments(self) -> Snapshot | None:
        """Sample the instrument stream and publish its two reports.

        Returns the pushed snapshot, or None when the fetch failed.
        """
        cfg = self.config
        try:
            instruments = self.provider.get_instruments()
        except WatcherError as e:
            _log.warning(
                "instruments_fetch_failed", code=e.code.value, retryable=e.retryable, error=str(e),
            )
            return None

        now = self.clock()
        snapshot = Snapshot.from_records(instruments, taken_at=now)
        evicted = self.history.push(snapshot)
        _log.info(
            "snapshot_pushed",
            instruments=len(snapshot),
            history=len(self.history),
            evicted=evicted is not None,
        )

        short = self.history.lookback(cfg.short_offset)
        long = self.history.lookback(cfg.long_offset)
        comparisons = [
            Comparison(format_window(cfg.short_window_seconds), short),
            Comparison(format_window(cfg.long_window_seconds), long),
            Comparison(format_window(cfg.eviction_window_seconds), evicted),
        ]

        movers = build_movers_report(
            snapshot, comparisons, now, top_count=cfg.top_movers, bottom_count=cfg.bottom_movers,
        )
        self._publish(MOVERS_REPORT, movers)

        rank_changes = build_rank_change_report(
            snapshot,
            long,
            now,
            count=cfg.top_rank_changes,
            window_label=format_window(cfg.long_window_seconds),
        )
        if rank_changes is None:
            _log.info(
                "rank_change_skipped", history=len(self.history), needed=cfg.long_offset + 1,
            )
        else:
            self._publish(RANK_CHANGE_REPORT, rank_changes)

        return snapshot

    # ------------------------------------------------------------ leaderboard

    def check_leaderboard(self) -> bool:
        """Sample the team ranking and publish the team report."""
        try:
            ranking = self.provider.get_ranking()
        except WatcherError as e:
            _log.warning(
                "ranking_fetch_failed", code=e.code.value, retryable=e.retryable, error=str(e),
            )
            return False

        text = build_team_report(ranking, self.clock(), count=self.config.team_count)
        return self._publish(TEAM_REPORT, text)

    # ------------------------------------------------------------------ loop

    def run_cycle(self) -> None:
        """Sample both streams; a crash in one does not skip the other."""
        streams: list[tuple[str, Callable[[], object]]] = [
            ("instruments", self.check_instruments),
            ("ranking", self.check_leaderboard),
        ]
        for stream, check in streams:
            try:
                check()
            except Exception:
                _log.exception("stream_crashed", stream=stream)
        _log.info("cycle_finished", history=len(self.history))

    def run_forever(
        self,
        max_cycles: int | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Run a cycle now and then one per sampling period.

        Cycles never overlap; a slow cycle delays the next one. With
        *max_cycles* the loop stops after that many cycles.
        """
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            if cycles:
                sleep(self.config.sampling_period_seconds)
            try:
                self.run_cycle()
            except Exception:
                _log.exception("cycle_crashed")
            cycles += 1

    # -------------------------------------------------------------- internal

    def _publish(self, report: str, text: str) -> bool:
        message_id = self.message_ids[report]
        try:
            published_id = self.publisher.publish(text, message_id)
        except WatcherError as e:
            _log.warning(
                "publish_failed", report=report, code=e.code.value, error=str(e),
            )
            return False

        if message_id is None:
            _log.info("message_created", report=report, message_id=published_id)
        self.message_ids[report] = published_id
        _log.info("report_published", report=report, message_id=published_id)
        return True
