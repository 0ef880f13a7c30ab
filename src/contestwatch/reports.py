"""Report builders — ranking, joining and formatting of snapshots.

Everything here is pure: the same inputs always render byte-identical
text, and absent history degrades single fields (``?``) or whole
reports (``None``) instead of raising.

Report layout::

    top 15 kurse (nach rel. veränderung)
    `* Name (4.2% [1.3€]) (3.9% 1h, 2.1% 2h, ?% 4h)`
    ...

    bottom 10 kurse (nach rel. veränderung)
    `* Name (-7.5% [-0.8€]) (-6% vor 1h, -5.5% vor 2h, ?% vor 4h)`
    ...


    aktualisiert: <t:1700000000>
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TypeVar

import numpy as np
import pandas as pd

from contestwatch.models.instrument import Instrument
from contestwatch.models.snapshot import Snapshot
from contestwatch.models.team import Team, TeamRanking

T = TypeVar("T")

UNKNOWN = "?"
UNAPPROVED_TEAM_NAME = "* (Name not yet approved)"
MASKED_TEAM_NAME = "<kein>"


# ------------------------------------------------------------- formatting

def format_number(value: float) -> str:
    """Render *value* with its shortest round-trip representation.

    Integral values drop the fractional part (``10`` not ``10.0``) and
    exponents are written out positionally (``0.00001``).
    """
    if math.isnan(value):
        return "NaN"
    return np.format_float_positional(float(value), trim="-")


def format_window(seconds: int) -> str:
    """Short label for a time window: ``1h``, ``30min`` or ``45s``."""
    if seconds % 3600 == 0:
        return f"{seconds // 3600}h"
    if seconds % 60 == 0:
        return f"{seconds // 60}min"
    return f"{seconds}s"


def timestamp_line(now: int) -> str:
    return f"\n\naktualisiert: <t:{now}>"


def render_block(
    header: str,
    items: Iterable[T],
    count: int,
    line: Callable[[T], str],
) -> str:
    """Render *header* plus one line for each of the first *count* items.

    Fewer items than *count* render what is there.
    """
    out = [f"{header}\n"]
    for i, item in enumerate(items):
        if i >= count:
            break
        out.append(f"{line(item)}\n")
    return "".join(out)


# ---------------------------------------------------------------- ranking

def rank_descending(
    values: Sequence[float],
    identities: Sequence[object] | None = None,
) -> list[int]:
    """Return positions of *values* ordered from highest to lowest.

    Ties keep their input order. NaN values cannot be ranked and are
    left out. With *identities*, only the best-ranked position of each
    identity is kept.
    """
    if identities is not None and len(identities) != len(values):
        raise ValueError("values and identities must have the same length")

    frame = pd.DataFrame({"value": pd.Series(list(values), dtype="float64")})
    frame["position"] = range(len(frame))
    if identities is not None:
        frame["identity"] = pd.Series(list(identities), dtype=object)

    frame = frame.dropna(subset=["value"])
    frame = frame.sort_values(["value", "position"], ascending=[False, True])
    if identities is not None:
        frame = frame.drop_duplicates(subset="identity", keep="first")
    return frame["position"].tolist()


def rank_instruments(snapshot: Snapshot) -> list[Instrument]:
    """Instruments by relative performance, best first, one per WKN."""
    instruments = list(snapshot.values())
    order = rank_descending(
        [i.value_rel for i in instruments],
        identities=[i.wkn for i in instruments],
    )
    return [instruments[i] for i in order]


# ----------------------------------------------------------- movers report

@dataclass(frozen=True)
class Comparison:
    """One historical comparison column of the movers report.

    Attributes:
        label: Window label, e.g. ``1h``.
        snapshot: Historical snapshot, None while history is too short.
    """

    label: str
    snapshot: Snapshot | None = None

    def value_for(self, key: str) -> str:
        if self.snapshot is None:
            return UNKNOWN
        record = self.snapshot.get(key)
        if record is None:
            return UNKNOWN
        return format_number(record.value_rel)


def _mover_line(comparisons: Sequence[Comparison], prefix: str) -> Callable[[Instrument], str]:
    def line(instrument: Instrument) -> str:
        history = ", ".join(
            f"{c.value_for(instrument.key)}% {prefix}{c.label}" for c in comparisons
        )
        return (
            f"`* {instrument.display_name} ({format_number(instrument.value_rel)}% "
            f"[{format_number(instrument.value_abs)}€]) ({history})`"
        )

    return line


def build_movers_report(
    current: Snapshot,
    comparisons: Sequence[Comparison],
    now: int,
    top_count: int = 15,
    bottom_count: int = 10,
) -> str:
    """Top and bottom instruments by relative performance.

    Each line carries the relative performance the same instrument had
    in every comparison snapshot.
    """
    ranked = rank_instruments(current)
    top = render_block(
        f"top {top_count} kurse (nach rel. veränderung)",
        ranked,
        top_count,
        _mover_line(comparisons, ""),
    )
    bottom = render_block(
        f"bottom {bottom_count} kurse (nach rel. veränderung)",
        reversed(ranked),
        bottom_count,
        _mover_line(comparisons, "vor "),
    )
    return top + "\n" + bottom + timestamp_line(now)


# ------------------------------------------------------ rank-change report

@dataclass(frozen=True)
class RankChange:
    """Change of relative performance against a historical snapshot."""

    key: str
    name: str
    delta: float


def compute_rank_changes(current: Snapshot, historical: Snapshot) -> list[RankChange]:
    """Deltas for keys present in both snapshots, largest gain first.

    Listings sharing a WKN count once, using the listing the movers
    ranking keeps.
    """
    listed = {i.key for i in rank_instruments(current)}
    changes: list[RankChange] = []
    for key, record in current.items():
        if key not in listed:
            continue
        old = historical.get(key)
        if old is None:
            continue
        changes.append(RankChange(
            key=key,
            name=old.display_name,
            delta=record.value_rel - old.value_rel,
        ))
    order = rank_descending([c.delta for c in changes])
    return [changes[i] for i in order]


def build_rank_change_report(
    current: Snapshot,
    historical: Snapshot | None,
    now: int,
    count: int = 20,
    window_label: str = "2h",
) -> str | None:
    """Top instruments by change in relative performance.

    Returns None when *historical* is not available yet.
    """
    if historical is None:
        return None
    block = render_block(
        f"top {count} kurse (nach diff. in rel. veränderung vor {window_label})",
        compute_rank_changes(current, historical),
        count,
        lambda c: f"`* {c.name} (Δ: {format_number(c.delta)}%)`",
    )
    return block + timestamp_line(now)


# ------------------------------------------------------------ team report

def mask_team_name(
    name: str,
    placeholder: str = UNAPPROVED_TEAM_NAME,
    masked_label: str = MASKED_TEAM_NAME,
) -> str:
    """Replace a not-yet-approved placeholder name with *masked_label*."""
    return masked_label if name == placeholder else name


def rank_teams(teams: Sequence[Team]) -> list[Team]:
    """Teams by depot value, highest first."""
    order = rank_descending([t.depot_value for t in teams])
    return [teams[i] for i in order]


def build_team_report(
    ranking: TeamRanking,
    now: int,
    count: int = 10,
    placeholder: str = UNAPPROVED_TEAM_NAME,
    masked_label: str = MASKED_TEAM_NAME,
) -> str:
    """Top and bottom teams by depot value plus the total team count."""

    def line(team: Team) -> str:
        return (
            f"`* {mask_team_name(team.display_name, placeholder, masked_label)} "
            f"({format_number(team.depot_value)}€, #{team.rank} / "
            f"{format_number(team.score)}%)`"
        )

    ranked = rank_teams(ranking.teams)
    top = render_block(f"top {count} teams (nach depot)", ranked, count, line)
    bottom = render_block(f"bottom {count} teams (nach depot)", reversed(ranked), count, line)
    return (
        top
        + "\n"
        + bottom
        + f"\n({ranking.total_elements} teams insgesamt)"
        + timestamp_line(now)
    )
