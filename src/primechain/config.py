"""Typed configuration loader for the primechain CLI."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .contracts.error import BadInputError
from .core.table import DEFAULT_CAPACITY


@dataclass
class TablePolicy:
    initial_capacity: int = DEFAULT_CAPACITY

    def validate(self) -> None:
        if isinstance(self.initial_capacity, bool) or not isinstance(self.initial_capacity, int):
            raise BadInputError("table.initial_capacity must be an integer")
        if self.initial_capacity <= 0:
            raise BadInputError("table.initial_capacity must be > 0")


@dataclass
class BenchPolicy:
    analysis_file: str = "analysis.txt"
    seed: int | None = None

    def validate(self) -> None:
        if not self.analysis_file or not str(self.analysis_file).strip():
            raise BadInputError("bench.analysis_file must be a non-empty path")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise BadInputError("bench.seed must be an integer or omitted")


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise BadInputError(f"[{name}] section must be a table")
    return value


def _build(cls: type, section: str, values: dict[str, Any]) -> Any:
    try:
        return cls(**values)
    except TypeError as exc:
        raise BadInputError(f"Unknown key in [{section}]: {exc}") from exc


def _optional_int(raw: str) -> int | None:
    if raw.strip().lower() in {"", "none", "random"}:
        return None
    return int(raw)


@dataclass
class AppConfig:
    table: TablePolicy = field(default_factory=TablePolicy)
    bench: BenchPolicy = field(default_factory=BenchPolicy)

    @classmethod
    def load(cls, path: Path | None) -> AppConfig:
        if path is None:
            cfg = cls()
        else:
            try:
                data = tomllib.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError as exc:
                raise BadInputError(f"Config file not found: {path}") from exc
            except tomllib.TOMLDecodeError as exc:
                raise BadInputError(f"Invalid TOML: {exc}") from exc
            cfg = cls.from_dict(data)
        cfg.apply_env_overrides(os.environ)
        cfg.validate()
        return cfg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        table = _build(TablePolicy, "table", _section(data, "table"))
        bench = _build(BenchPolicy, "bench", _section(data, "bench"))
        return cls(table=table, bench=bench)

    def apply_env_overrides(self, env: Mapping[str, str]) -> None:
        mapping: dict[str, tuple[object, str, Callable[[str], Any]]] = {
            "PRIMECHAIN_INITIAL_CAPACITY": (self.table, "initial_capacity", int),
            "PRIMECHAIN_ANALYSIS_FILE": (self.bench, "analysis_file", str),
            "PRIMECHAIN_SEED": (self.bench, "seed", _optional_int),
        }
        for key, (target, attr, caster) in mapping.items():
            raw_value = env.get(key)
            if raw_value is None:
                continue
            try:
                value = caster(raw_value)
            except ValueError as exc:
                raise BadInputError(f"Invalid env override {key}={raw_value!r}") from exc
            setattr(target, attr, value)

    def validate(self) -> None:
        self.table.validate()
        self.bench.validate()


def load_app_config(path: str | None) -> AppConfig:
    config_path = Path(path) if path else None
    return AppConfig.load(config_path)
