"""Instrument data model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Instrument:
    """One tradable instrument of the contest universe at one instant.

    Attributes:
        key: Stable identity (upstream ``idExternal``).
        name: Display name.
        wkn: Registration code; several listings of the same instrument
            share it.
        price: Last price in EUR.
        performance_abs: Absolute change in EUR.
        performance_rel: Relative change in percent.
    """

    key: str
    name: str
    wkn: str
    price: float
    performance_abs: float
    performance_rel: float

    @property
    def display_name(self) -> str:
        return self.name

    @property
    def value_abs(self) -> float:
        return self.performance_abs

    @property
    def value_rel(self) -> float:
        return self.performance_rel
