"""Append-only CSV log of benchmark phase timings."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from primechain.contracts.error import IOErrorEnvelope

if TYPE_CHECKING:  # pragma: no cover
    from primechain.bench.runner import PhaseTiming


def format_timing_line(timing: "PhaseTiming") -> str:
    """Render ``label,itemCount,insertSeconds,searchSeconds,deleteSeconds``."""

    return (
        f"{timing.label},{timing.item_count},"
        f"{timing.insert_seconds:.9f},{timing.search_seconds:.9f},{timing.delete_seconds:.9f}\n"
    )


def append_timings(path: str | Path, timings: Iterable["PhaseTiming"]) -> Path:
    out_path = Path(path).expanduser()
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("a", encoding="utf-8") as fh:
            for timing in timings:
                fh.write(format_timing_line(timing))
    except IsADirectoryError as exc:
        raise IOErrorEnvelope(f"Analysis log path is a directory: {out_path}") from exc
    return out_path


__all__ = ["append_timings", "format_timing_line"]
