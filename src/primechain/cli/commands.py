"""CLI command registration and handlers for primechain."""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from primechain.bench.runner import format_phase_report
from primechain.contracts.error import BadInputError, Exit, InvariantError


@dataclass(frozen=True)
class CLIContext:
    """Runtime hooks supplied by the top-level CLI entrypoint."""

    emit_success: Callable[..., None]
    run_bench: Callable[..., Dict[str, Any]]
    run_stats: Callable[..., Dict[str, Any]]
    logger: logging.Logger
    guard: Callable[[Callable[[argparse.Namespace], int]], Callable[[argparse.Namespace], int]]


def register_subcommands(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ctx: CLIContext,
) -> Dict[str, Callable[[argparse.Namespace], int]]:
    """Define CLI subcommands and return their handlers."""

    handlers: Dict[str, Callable[[argparse.Namespace], int]] = {}

    def _register(
        name: str,
        help_text: Optional[str],
        configure: Callable[[argparse.ArgumentParser], Callable[[argparse.Namespace], int]],
    ) -> None:
        parser = subparsers.add_parser(name, help=help_text)
        handler = configure(parser)
        handlers[name] = ctx.guard(handler)

    _register(
        "bench",
        "Time insert/search/delete over sorted, shuffled and reversed movie titles.",
        lambda parser: _configure_bench(parser, ctx),
    )
    _register(
        "stats",
        "Load movie titles into a table and report occupancy statistics.",
        lambda parser: _configure_stats(parser, ctx),
    )
    return handlers


def _positive_int(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {raw!r}") from exc
    if value <= 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return value


def _add_dataset_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("dataset", help="Movie CSV file (first row is a header)")
    parser.add_argument("lines", type=int, help="Number of data rows to read")
    parser.add_argument(
        "--capacity",
        type=_positive_int,
        default=None,
        help="Initial capacity hint (rounded up to a prime; default from config, 101)",
    )


def _check_lines(lines: int) -> None:
    if lines < 0:
        raise BadInputError(f"lines must be >= 0, got {lines}")


def _configure_bench(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    _add_dataset_args(parser)
    parser.add_argument(
        "--analysis-out",
        default=None,
        help="Append CSV timing rows here (default from config: analysis.txt)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the shuffled ordering")
    parser.add_argument(
        "--json-summary-out", default=None, help="Write a schema-validated JSON summary"
    )

    def handler(args: argparse.Namespace) -> int:
        _check_lines(args.lines)
        result = ctx.run_bench(
            args.dataset,
            args.lines,
            analysis_out=args.analysis_out,
            seed=args.seed,
            capacity=args.capacity,
            json_summary_out=args.json_summary_out,
        )
        ctx.logger.info(
            "bench finished: %d phase(s), timings appended to %s",
            len(result["timings"]),
            result["analysis_file"],
        )
        text = "\n\n".join(format_phase_report(timing) for timing in result["timings"])
        ctx.emit_success(
            "bench",
            text=text,
            data={"summary": result["summary"], "analysis_file": result["analysis_file"]},
        )
        return int(Exit.OK)

    return handler


def _configure_stats(
    parser: argparse.ArgumentParser, ctx: CLIContext
) -> Callable[[argparse.Namespace], int]:
    _add_dataset_args(parser)
    parser.add_argument(
        "--query",
        action="append",
        default=[],
        metavar="TITLE",
        help="Report whether TITLE is stored (repeatable; exact, case-sensitive match)",
    )

    def handler(args: argparse.Namespace) -> int:
        _check_lines(args.lines)
        stats = ctx.run_stats(
            args.dataset, args.lines, capacity=args.capacity, queries=args.query
        )
        problems = stats.pop("problems")
        if problems:
            ctx.logger.error("table self-check failed: %s", problems)
            raise InvariantError("; ".join(problems), hint="Table failed its self-check.")
        lines = [
            f"rows={stats['rows']} size={stats['size']} capacity={stats['capacity']}",
            f"load_factor={stats['load_factor']:.3f} max_chain_len={stats['max_chain_len']} "
            f"empty_buckets={stats['empty_buckets']} rehashes={stats['rehashes']}",
        ]
        for title, found in stats["queries"].items():
            lines.append(f"{title}: {'found' if found else 'missing'}")
        ctx.emit_success("stats", text="\n".join(lines), data=stats)
        return int(Exit.OK)

    return handler


__all__ = ["CLIContext", "register_subcommands"]
