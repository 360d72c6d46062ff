"""
app.py

Command-line entrypoint for primechain:
- bench: time insert/search/delete of movie titles in a ChainedHashTable over
  sorted, shuffled and reversed orderings, appending CSV rows to an analysis log
- stats: load titles into a table and report occupancy, chain lengths and
  membership queries, with a structural self-check
"""

from __future__ import annotations

import argparse
import contextlib
import json
import logging
import os
import random
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

from primechain.bench.runner import (
    PhaseTiming,
    default_table_factory,
    run_benchmark,
    summary_payload,
    write_summary,
)
from primechain.cli.commands import CLIContext, register_subcommands
from primechain.config import AppConfig, load_app_config
from primechain.contracts.error import PolicyError, guard_cli
from primechain.core.table import ChainedHashTable
from primechain.io.analysis_log import append_timings
from primechain.io.movies import read_movies

# --------------------------------------------------------------------
# Logging
# --------------------------------------------------------------------
logger = logging.getLogger("primechain")
logger.setLevel(logging.INFO)
logger.propagate = False

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"
DEFAULT_LOG_MAX_BYTES = 5_000_000
DEFAULT_LOG_BACKUP_COUNT = 5


class JsonFormatter(logging.Formatter):
    """Render log records as JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, DEFAULT_LOG_DATEFMT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(
    use_json: bool = False,
    log_file: str | None = None,
    *,
    verbose: bool = False,
    max_bytes: int = DEFAULT_LOG_MAX_BYTES,
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT,
) -> None:
    """Configure stderr (and optional rotating file) logging."""

    formatter: logging.Formatter
    if use_json:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(DEFAULT_LOG_FORMAT, DEFAULT_LOG_DATEFMT)

    for handler in list(logger.handlers):
        with contextlib.suppress(Exception):
            handler.close()
        logger.removeHandler(handler)

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    if log_file:
        handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
        handler.setFormatter(formatter)
        logger.addHandler(handler)


configure_logging()

APP_CONFIG: AppConfig = AppConfig()
OUTPUT_JSON: bool = False


def set_app_config(cfg: AppConfig) -> None:
    global APP_CONFIG
    APP_CONFIG = cfg


def emit_success(
    command: str, *, text: str | None = None, data: dict[str, Any] | None = None
) -> None:
    if OUTPUT_JSON:
        payload: dict[str, Any] = {"ok": True, "command": command}
        if data:
            payload.update(data)
        if text is not None and "result" not in payload:
            payload["result"] = text
        print(json.dumps(payload, ensure_ascii=False))
    else:
        if text is not None:
            print(text)


# --------------------------------------------------------------------
# Runners
# --------------------------------------------------------------------
def build_table(capacity: int | None = None) -> ChainedHashTable[str]:
    return ChainedHashTable(capacity or APP_CONFIG.table.initial_capacity)


def run_bench(
    dataset: str,
    lines: int,
    *,
    analysis_out: str | None = None,
    seed: int | None = None,
    capacity: int | None = None,
    json_summary_out: str | None = None,
) -> dict[str, Any]:
    """Load ``lines`` movies, time the three orderings and append the analysis log."""

    movies = read_movies(dataset, lines)
    initial_capacity = capacity or APP_CONFIG.table.initial_capacity
    rng_seed = seed if seed is not None else APP_CONFIG.bench.seed
    timings: list[PhaseTiming] = run_benchmark(
        movies,
        table_factory=default_table_factory(initial_capacity),
        rng=random.Random(rng_seed),
    )
    log_path = append_timings(analysis_out or APP_CONFIG.bench.analysis_file, timings)
    logger.info("Appended %d timing row(s) to %s", len(timings), log_path)

    payload = summary_payload(timings, dataset=str(dataset), initial_capacity=initial_capacity)
    if json_summary_out:
        out = write_summary(json_summary_out, payload)
        logger.info("Wrote JSON summary to %s", out)
    return {"summary": payload, "analysis_file": str(log_path), "timings": timings}


def run_stats(
    dataset: str,
    lines: int,
    *,
    capacity: int | None = None,
    queries: list[str] | None = None,
) -> dict[str, Any]:
    """Insert every title and describe the resulting table."""

    movies = read_movies(dataset, lines)
    table = build_table(capacity)
    for movie in movies:
        table.insert(movie.name)
    chains = table.chain_lengths()
    return {
        "rows": len(movies),
        "size": len(table),
        "capacity": table.capacity,
        "load_factor": table.load_factor(),
        "max_chain_len": table.max_chain_len(),
        "empty_buckets": sum(1 for n in chains if n == 0),
        "rehashes": table.rehash_count,
        "queries": {title: table.contains(title) for title in queries or []},
        "problems": table.check_invariants(),
    }


# --------------------------------------------------------------------
# CLI
# --------------------------------------------------------------------
def main(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        description=(
            "Separate-chaining hash table toolkit: timing harness over movie titles "
            "and table occupancy statistics."
        )
    )
    p.add_argument("--log-json", action="store_true", help="Emit logs in JSON format")
    p.add_argument(
        "--log-file",
        default=None,
        help="Optional log file path (rotates at 5MB, keeps 5 backups by default)",
    )
    p.add_argument(
        "--log-max-bytes",
        type=int,
        default=DEFAULT_LOG_MAX_BYTES,
        help="Max bytes per log file before rotation (default: %(default)s)",
    )
    p.add_argument(
        "--log-backup-count",
        type=int,
        default=DEFAULT_LOG_BACKUP_COUNT,
        help="Number of rotated log files to keep (default: %(default)s)",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log rehash events (DEBUG)")
    p.add_argument(
        "--json", action="store_true", help="Emit machine-readable success output to stdout"
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to TOML config file (env overrides still apply)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    ctx = CLIContext(
        emit_success=emit_success,
        run_bench=run_bench,
        run_stats=run_stats,
        logger=logger,
        guard=guard_cli,
    )
    handlers = register_subcommands(sub, ctx)

    args = p.parse_args(argv)

    global OUTPUT_JSON
    OUTPUT_JSON = bool(args.json)

    configure_logging(
        args.log_json,
        args.log_file,
        verbose=args.verbose,
        max_bytes=args.log_max_bytes,
        backup_count=args.log_backup_count,
    )

    cfg_path = args.config or os.getenv("PRIMECHAIN_CONFIG")
    cfg = guard_cli(load_app_config)(cfg_path)
    set_app_config(cfg)
    if cfg_path:
        logger.info("Loaded config from %s", cfg_path)

    handler = handlers.get(args.cmd)
    if handler is None:
        raise PolicyError(f"Unknown command {args.cmd}")
    return handler(args)


def console_main() -> None:
    """Entry point for console_scripts."""

    try:
        raise SystemExit(main(sys.argv[1:]))
    except SystemExit:
        raise
    except Exception as e:  # noqa: BLE001
        logger.exception("Fatal error: %s", e)
        raise SystemExit(2) from e


if __name__ == "__main__":
    console_main()
