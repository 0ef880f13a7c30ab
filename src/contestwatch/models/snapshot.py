"""Snapshot data model — the instrument universe at one sampling instant."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from contestwatch.models.instrument import Instrument


@dataclass(frozen=True)
class Snapshot(Mapping[str, Instrument]):
    """Read-only ``key -> Instrument`` mapping captured by one fetch.

    Iteration follows upstream order. Build it with ``from_records`` so
    duplicate keys are resolved before the mapping is sealed.

    Attributes:
        records: Sealed mapping of instrument key to instrument.
        taken_at: Epoch seconds of the sampling cycle, if known.
    """

    records: Mapping[str, Instrument]
    taken_at: int | None = None

    @classmethod
    def from_records(
        cls, records: Iterable[Instrument], taken_at: int | None = None,
    ) -> Snapshot:
        """Seal *records* into a snapshot; the first record per key wins."""
        by_key: dict[str, Instrument] = {}
        for record in records:
            if record.key not in by_key:
                by_key[record.key] = record
        return cls(records=MappingProxyType(by_key), taken_at=taken_at)

    def __getitem__(self, key: str) -> Instrument:
        return self.records[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)
