"""Benchmark helpers for timing ChainedHashTable workloads."""

from .runner import (
    PHASE_LABELS,
    SUMMARY_SCHEMA,
    PhaseTiming,
    default_table_factory,
    format_phase_report,
    orderings,
    run_benchmark,
    summary_payload,
    time_phase,
    validate_summary,
    write_summary,
)

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
