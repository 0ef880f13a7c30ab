"""Planspiel Börse data provider.

Fetches the instrument universe and the team ranking of the contest
over its REST API using ``requests`` with a bearer token.
"""

from __future__ import annotations

import os
from typing import Any

import certifi
import requests

from contestwatch.config import MARKET_URL, RANKING_URL
from contestwatch.errors import WatcherError, WatcherErrorCode
from contestwatch.log import get_logger
from contestwatch.models.instrument import Instrument
from contestwatch.models.team import Team, TeamRanking
from contestwatch.providers.base import BaseContestProvider

_log = get_logger(component="providers.planspiel")


class PlanspielProvider(BaseContestProvider):
    """Fetch contest data from the Planspiel Börse API.

    Capabilities: instruments, ranking.
    """

    def __init__(
        self,
        token: str | None = None,
        market_url: str = MARKET_URL,
        ranking_url: str = RANKING_URL,
        ranking_query: dict[str, Any] | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.token = token or os.getenv("PSB_TOKEN")
        if not self.token:
            raise WatcherError(
                "Planspiel token required. Set PSB_TOKEN env var or pass token.",
                code=WatcherErrorCode.AUTH_FAILED,
            )

        self.market_url = market_url
        self.ranking_url = ranking_url
        self.ranking_query = dict(ranking_query or {})
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers["Authorization"] = f"Bearer {self.token}"
        self.session.verify = certifi.where()

    # ----------------------------------------------------------- instruments

    def get_instruments(self) -> list[Instrument]:
        data = self._request("GET", self.market_url)
        if not isinstance(data, list):
            raise WatcherError(
                f"Unexpected instrument payload: {type(data).__name__}",
                code=WatcherErrorCode.PARSE_FAILED,
                retryable=True,
            )

        instruments: list[Instrument] = []
        dropped = 0
        for group in data:
            entries = group.get("instrumentList") if isinstance(group, dict) else None
            if not isinstance(entries, list):
                dropped += 1
                continue
            for raw in entries:
                instrument = self._decode_instrument(raw)
                if instrument is None:
                    dropped += 1
                    continue
                instruments.append(instrument)

        if dropped:
            _log.debug("instrument_records_dropped", dropped=dropped, kept=len(instruments))
        return instruments

    # --------------------------------------------------------------- ranking

    def get_ranking(self) -> TeamRanking:
        data = self._request("POST", self.ranking_url, json=self.ranking_query)
        if not isinstance(data, dict):
            raise WatcherError(
                f"Unexpected ranking payload: {type(data).__name__}",
                code=WatcherErrorCode.PARSE_FAILED,
                retryable=True,
            )

        total = data.get("totalElements")
        content = data.get("content")
        if not isinstance(total, int) or isinstance(total, bool) or total < 0:
            raise WatcherError(
                "Ranking payload has no valid totalElements",
                code=WatcherErrorCode.PARSE_FAILED,
                retryable=True,
            )
        if not isinstance(content, list):
            raise WatcherError(
                "Ranking payload has no content list",
                code=WatcherErrorCode.PARSE_FAILED,
                retryable=True,
            )

        teams: list[Team] = []
        for position, raw in enumerate(content):
            team = self._decode_team(raw, position)
            if team is not None:
                teams.append(team)

        if len(teams) < len(content):
            _log.debug("team_records_dropped", dropped=len(content) - len(teams), kept=len(teams))
        return TeamRanking(teams=tuple(teams), total_elements=total)

    # ------------------------------------------------------------- decoding

    @staticmethod
    def _decode_instrument(raw: Any) -> Instrument | None:
        try:
            return Instrument(
                key=_as_str(raw["idExternal"]),
                name=_as_str(raw["name"]),
                wkn=_as_str(raw["wkn"]),
                price=_as_float(raw["price"]),
                performance_abs=_as_float(raw["performanceAbs"]),
                performance_rel=_as_float(raw["performanceRel"]),
            )
        except (KeyError, TypeError, ValueError):
            return None

    @staticmethod
    def _decode_team(raw: Any, position: int) -> Team | None:
        try:
            rank = raw["performanceRank"]
            if not isinstance(rank, int) or isinstance(rank, bool) or rank < 0:
                raise ValueError(f"invalid performanceRank: {rank!r}")
            team_id = raw.get("id")
            return Team(
                key=str(team_id) if team_id is not None else str(position),
                name=_as_str(raw["name"]),
                depot_value=_as_float(raw["depotValue"]),
                performance=_as_float(raw["performance"]),
                performance_rank=rank,
            )
        except (AttributeError, KeyError, TypeError, ValueError):
            return None

    # ------------------------------------------------------------ internals

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.Timeout as exc:
            raise WatcherError(
                f"Planspiel request timed out: {url}",
                code=WatcherErrorCode.TIMEOUT,
                retryable=True,
            ) from exc
        except requests.RequestException as exc:
            raise WatcherError(
                f"Planspiel request failed: {exc}",
                code=WatcherErrorCode.FETCH_FAILED,
                retryable=True,
            ) from exc

        self._check_response(resp)
        try:
            return resp.json()
        except ValueError as exc:
            raise WatcherError(
                f"Planspiel returned invalid JSON: {exc}",
                code=WatcherErrorCode.PARSE_FAILED,
                retryable=True,
            ) from exc

    def _check_response(self, resp: Any) -> None:
        if resp.status_code in (401, 403):
            raise WatcherError(
                "Planspiel authentication failed",
                code=WatcherErrorCode.AUTH_FAILED,
            )
        if resp.status_code == 429:
            raise WatcherError(
                "Planspiel rate limited",
                code=WatcherErrorCode.RATE_LIMITED,
                retryable=True,
            )
        try:
            resp.raise_for_status()
        except requests.HTTPError as exc:
            raise WatcherError(
                f"Planspiel request failed: {exc}",
                code=WatcherErrorCode.FETCH_FAILED,
                retryable=True,
            ) from exc


def _as_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected string, got {type(value).__name__}")
    return value


def _as_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected number, got {type(value).__name__}")
    return float(value)
