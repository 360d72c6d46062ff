"""Timing harness: insert/search/delete passes over sorted, shuffled and reversed datasets."""

from __future__ import annotations

import json
import logging
import random
import time
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from primechain.contracts.error import InvariantError
from primechain.core.table import DEFAULT_CAPACITY, ChainedHashTable
from primechain.models import Movie

logger = logging.getLogger("primechain")

SUMMARY_SCHEMA = "primechain.bench.v1"
PHASE_LABELS: tuple[str, ...] = ("Sorted", "Shuffled", "Reversed")

TableFactory = Callable[[], ChainedHashTable[str]]
Clock = Callable[[], int]


@dataclass(frozen=True)
class PhaseTiming:
    label: str
    item_count: int
    insert_seconds: float
    search_seconds: float
    delete_seconds: float
    final_capacity: int = DEFAULT_CAPACITY
    rehashes: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "items": self.item_count,
            "insert_seconds": self.insert_seconds,
            "search_seconds": self.search_seconds,
            "delete_seconds": self.delete_seconds,
            "final_capacity": self.final_capacity,
            "rehashes": self.rehashes,
        }


def default_table_factory(capacity: int = DEFAULT_CAPACITY) -> TableFactory:
    return lambda: ChainedHashTable(capacity)


def time_phase(
    label: str,
    keys: Sequence[str],
    *,
    table_factory: TableFactory,
    clock: Clock = time.perf_counter_ns,
) -> PhaseTiming:
    """Time one insert pass, one search pass and one delete pass on a fresh table."""

    table = table_factory()

    insert_start = clock()
    for key in keys:
        table.insert(key)
    insert_end = clock()
    capacity = table.capacity

    search_start = clock()
    for key in keys:
        table.contains(key)
    search_end = clock()

    delete_start = clock()
    for key in keys:
        table.remove(key)
    delete_end = clock()

    timing = PhaseTiming(
        label=label,
        item_count=len(keys),
        insert_seconds=(insert_end - insert_start) / 1e9,
        search_seconds=(search_end - search_start) / 1e9,
        delete_seconds=(delete_end - delete_start) / 1e9,
        final_capacity=capacity,
        rehashes=table.rehash_count,
    )
    logger.info(
        "%s phase: %d keys, insert=%.6fs search=%.6fs delete=%.6fs (capacity=%d)",
        label,
        timing.item_count,
        timing.insert_seconds,
        timing.search_seconds,
        timing.delete_seconds,
        capacity,
    )
    return timing


def orderings(movies: Sequence[Movie], rng: random.Random) -> Iterator[tuple[str, list[Movie]]]:
    """Yield the ascending, shuffled and descending arrangements of ``movies``."""

    yield "Sorted", sorted(movies)
    shuffled = list(movies)
    rng.shuffle(shuffled)
    yield "Shuffled", shuffled
    yield "Reversed", sorted(movies, reverse=True)


def run_benchmark(
    movies: Sequence[Movie],
    *,
    table_factory: TableFactory | None = None,
    rng: random.Random | None = None,
    clock: Clock = time.perf_counter_ns,
) -> list[PhaseTiming]:
    factory = table_factory or default_table_factory()
    rng = rng or random.Random()
    timings: list[PhaseTiming] = []
    for label, ordered in orderings(movies, rng):
        titles = [movie.name for movie in ordered]
        timings.append(time_phase(label, titles, table_factory=factory, clock=clock))
    return timings


def format_phase_report(timing: PhaseTiming) -> str:
    return "\n".join(
        [
            f"==== {timing.label} Movies ====",
            f"Insert time: {timing.insert_seconds:.6f} sec",
            f"Search time: {timing.search_seconds:.6f} sec",
            f"Delete time: {timing.delete_seconds:.6f} sec",
        ]
    )


@lru_cache(maxsize=1)
def _summary_validator() -> Draft202012Validator:
    schema_resource = resources.files("primechain.contracts") / "bench_summary_schema.json"
    with schema_resource.open(encoding="utf-8") as stream:
        schema = json.load(stream)
    return Draft202012Validator(schema)


def validate_summary(payload: dict[str, Any]) -> None:
    errors = sorted(_summary_validator().iter_errors(payload), key=lambda err: list(err.path))
    if errors:
        detail = "; ".join(f"{err.message} @ {list(err.path)}" for err in errors)
        raise InvariantError(f"Bench summary failed schema validation: {detail}")


def summary_payload(
    timings: Sequence[PhaseTiming], *, dataset: str, initial_capacity: int
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "schema": SUMMARY_SCHEMA,
        "dataset": dataset,
        "items": timings[0].item_count if timings else 0,
        "initial_capacity": initial_capacity,
        "generated_at": datetime.now(UTC).isoformat(),
        "phases": [timing.to_dict() for timing in timings],
    }
    validate_summary(payload)
    return payload


def write_summary(path: str | Path, payload: dict[str, Any]) -> Path:
    out_path = Path(path).expanduser()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return out_path


__all__ = [
    "PHASE_LABELS",
    "PhaseTiming",
    "SUMMARY_SCHEMA",
    "default_table_factory",
    "format_phase_report",
    "orderings",
    "run_benchmark",
    "summary_payload",
    "time_phase",
    "validate_summary",
    "write_summary",
]
