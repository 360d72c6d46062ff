from __future__ import annotations

import itertools
import json
import random
from pathlib import Path

import pytest

from primechain.bench.runner import (
    PHASE_LABELS,
    SUMMARY_SCHEMA,
    PhaseTiming,
    format_phase_report,
    orderings,
    run_benchmark,
    summary_payload,
    time_phase,
    validate_summary,
    write_summary,
)
from primechain.contracts.error import InvariantError
from primechain.core import ChainedHashTable
from primechain.models import Movie


def _ticking_clock(step_ns: int = 1_000):
    counter = itertools.count(0, step_ns)
    return lambda: next(counter)


def _movies() -> list[Movie]:
    return [
        Movie(name="Inception", rating=8.8),
        Movie(name="Up", rating=8.3),
        Movie(name="Coco", rating=8.4),
        Movie(name="Brave", rating=7.1),
    ]


def test_time_phase_measures_each_pass_and_empties_table() -> None:
    tables: list[ChainedHashTable[str]] = []

    def factory() -> ChainedHashTable[str]:
        table: ChainedHashTable[str] = ChainedHashTable(5)
        tables.append(table)
        return table

    keys = [f"t{i}" for i in range(12)]
    timing = time_phase("Sorted", keys, table_factory=factory, clock=_ticking_clock())
    assert timing.label == "Sorted"
    assert timing.item_count == 12
    assert timing.insert_seconds == pytest.approx(1e-6)
    assert timing.search_seconds == pytest.approx(1e-6)
    assert timing.delete_seconds == pytest.approx(1e-6)
    assert timing.final_capacity == 23
    assert timing.rehashes == 2
    assert len(tables) == 1 and len(tables[0]) == 0


def test_orderings_sorted_shuffled_reversed() -> None:
    movies = _movies()
    arranged = dict(orderings(movies, random.Random(7)))
    assert tuple(arranged) == PHASE_LABELS
    assert [m.name for m in arranged["Sorted"]] == ["Brave", "Up", "Coco", "Inception"]
    assert [m.name for m in arranged["Reversed"]] == ["Inception", "Coco", "Up", "Brave"]
    assert sorted(m.name for m in arranged["Shuffled"]) == sorted(m.name for m in movies)
    # Input order is left alone.
    assert [m.name for m in movies] == ["Inception", "Up", "Coco", "Brave"]


def test_run_benchmark_uses_fresh_table_per_phase() -> None:
    built: list[ChainedHashTable[str]] = []

    def factory() -> ChainedHashTable[str]:
        table: ChainedHashTable[str] = ChainedHashTable()
        built.append(table)
        return table

    timings = run_benchmark(
        _movies(), table_factory=factory, rng=random.Random(1), clock=_ticking_clock()
    )
    assert [t.label for t in timings] == list(PHASE_LABELS)
    assert all(t.item_count == 4 for t in timings)
    assert len(built) == 3
    assert len({id(table) for table in built}) == 3


def test_format_phase_report() -> None:
    report = format_phase_report(PhaseTiming("Reversed", 2, 0.25, 0.5, 1.0))
    assert report.splitlines() == [
        "==== Reversed Movies ====",
        "Insert time: 0.250000 sec",
        "Search time: 0.500000 sec",
        "Delete time: 1.000000 sec",
    ]


def test_summary_payload_validates_and_writes(tmp_path: Path) -> None:
    timings = run_benchmark(_movies(), rng=random.Random(3), clock=_ticking_clock())
    payload = summary_payload(timings, dataset="movies.csv", initial_capacity=101)
    assert payload["schema"] == SUMMARY_SCHEMA
    assert payload["items"] == 4
    assert [phase["label"] for phase in payload["phases"]] == list(PHASE_LABELS)

    out = write_summary(tmp_path / "out" / "summary.json", payload)
    assert json.loads(out.read_text(encoding="utf-8"))["dataset"] == "movies.csv"


def test_validate_summary_rejects_bad_payload() -> None:
    timings = [PhaseTiming("Sorted", 1, 0.1, 0.1, 0.1)]
    payload = summary_payload(timings, dataset="d.csv", initial_capacity=101)
    payload["phases"][0]["label"] = "Backwards"
    with pytest.raises(InvariantError):
        validate_summary(payload)
    payload.pop("phases")
    with pytest.raises(InvariantError):
        validate_summary(payload)
