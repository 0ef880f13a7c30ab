"""Tests for data models."""

from types import MappingProxyType

import pytest

from contestwatch.models.instrument import Instrument
from contestwatch.models.snapshot import Snapshot
from contestwatch.models.team import Team, TeamRanking

from conftest import make_instrument


class TestInstrument:
    def test_create(self):
        ins = Instrument(
            key="123", name="Apple", wkn="865985",
            price=180.5, performance_abs=2.5, performance_rel=1.4,
        )
        assert ins.key == "123"
        assert ins.wkn == "865985"

    def test_record_aliases(self):
        ins = make_instrument("1", 3.5, name="Apple", abs_=0.7)
        assert ins.display_name == "Apple"
        assert ins.value_rel == 3.5
        assert ins.value_abs == 0.7

    def test_frozen(self):
        ins = make_instrument("1", 3.5)
        with pytest.raises(AttributeError):
            ins.performance_rel = 9.9  # type: ignore[misc]


class TestTeam:
    def test_record_aliases(self):
        team = Team(key="7", name="Bulls", depot_value=101_000.0,
                    performance=1.0, performance_rank=3)
        assert team.display_name == "Bulls"
        assert team.rank == 3
        assert team.score == 1.0

    def test_frozen(self):
        team = Team(key="7", name="Bulls", depot_value=101_000.0,
                    performance=1.0, performance_rank=3)
        with pytest.raises(AttributeError):
            team.depot_value = 0.0  # type: ignore[misc]

    def test_ranking_keeps_upstream_total(self):
        team = Team(key="7", name="Bulls", depot_value=1.0, performance=0.0, performance_rank=1)
        ranking = TeamRanking(teams=(team,), total_elements=9000)
        assert ranking.total_elements == 9000
        assert len(ranking.teams) == 1


class TestSnapshot:
    def test_mapping_access(self):
        a = make_instrument("A", 10.0)
        b = make_instrument("B", 5.0)
        snap = Snapshot.from_records([a, b], taken_at=42)
        assert snap["A"] is a
        assert snap.get("C") is None
        assert "B" in snap
        assert len(snap) == 2
        assert snap.taken_at == 42

    def test_preserves_upstream_order(self):
        records = [make_instrument(k, 0.0) for k in ("z", "a", "m")]
        snap = Snapshot.from_records(records)
        assert list(snap) == ["z", "a", "m"]

    def test_duplicate_key_first_wins(self):
        first = make_instrument("A", 1.0, name="first")
        second = make_instrument("A", 2.0, name="second")
        snap = Snapshot.from_records([first, second])
        assert len(snap) == 1
        assert snap["A"].name == "first"

    def test_sealed(self):
        snap = Snapshot.from_records([make_instrument("A", 1.0)])
        assert isinstance(snap.records, MappingProxyType)
        with pytest.raises(TypeError):
            snap.records["B"] = make_instrument("B", 2.0)  # type: ignore[index]
        with pytest.raises(AttributeError):
            snap.taken_at = 1  # type: ignore[misc]

    def test_source_list_changes_do_not_leak(self):
        records = [make_instrument("A", 1.0)]
        snap = Snapshot.from_records(records)
        records.append(make_instrument("B", 2.0))
        assert len(snap) == 1

    def test_empty(self):
        snap = Snapshot.from_records([])
        assert len(snap) == 0
        assert snap.taken_at is None
