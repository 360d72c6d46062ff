"""Failure classification for primechain commands.

Every command handler runs under :func:`guard_cli`. A failure becomes one JSON
line on stderr (``{"error": ..., "detail": ..., "hint": ...}``) and a stable
process exit code from :class:`Exit`.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from dataclasses import asdict, dataclass
from enum import IntEnum
from functools import wraps
from typing import Any, ClassVar, NoReturn, TypeVar

logger = logging.getLogger(__name__)
T = TypeVar("T")


class Exit(IntEnum):
    OK = 0
    BAD_INPUT = 2
    INVARIANT = 3
    POLICY = 4
    IO = 5


@dataclass(slots=True)
class ErrorEnvelope:
    error: str
    detail: str
    hint: str | None = None

    def to_json(self) -> str:
        payload = {key: value for key, value in asdict(self).items() if value}
        payload.setdefault("detail", self.detail)
        return json.dumps(payload, ensure_ascii=False)


def die(code: Exit, kind: str, detail: str, hint: str | None = None) -> NoReturn:
    """Write the envelope to stderr and exit with ``code``."""

    sys.stderr.write(ErrorEnvelope(kind, detail, hint).to_json() + "\n")
    sys.stderr.flush()
    sys.exit(int(code))


class EnvelopeError(Exception):
    """Failure that knows its own envelope label and exit code."""

    exit_code: ClassVar[Exit] = Exit.POLICY
    label: ClassVar[str] = "UnhandledEnvelope"

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class BadInputError(EnvelopeError):
    """Malformed dataset rows, flags or config values."""

    exit_code = Exit.BAD_INPUT
    label = "BadInput"


class InvariantError(EnvelopeError):
    """A table or summary failed its structural self-check."""

    exit_code = Exit.INVARIANT
    label = "Invariant"


class PolicyError(EnvelopeError):
    """Unsupported command."""

    exit_code = Exit.POLICY
    label = "Policy"


class IOErrorEnvelope(EnvelopeError):  # noqa: N818 - matches the other envelope names
    """Dataset, log or summary path that cannot be read or written."""

    exit_code = Exit.IO
    label = "IO"


# Checked in order; subclasses must precede OSError.
_BUILTIN_FAILURES: tuple[tuple[type[BaseException], Exit, str, str | None], ...] = (
    (FileNotFoundError, Exit.IO, "FileNotFound", "Check the dataset path."),
    (IsADirectoryError, Exit.IO, "IO", "Pass a CSV file, not a directory."),
    (UnicodeDecodeError, Exit.BAD_INPUT, "BadInput", "Datasets must be UTF-8 encoded."),
    (OSError, Exit.IO, "IO", None),
)


def guard_cli(fn: Callable[..., T]) -> Callable[..., T]:
    """Wrap a command handler so failures become envelopes and stable exit codes."""

    @wraps(fn)
    def _wrapped(*args: Any, **kwargs: Any) -> T:
        try:
            return fn(*args, **kwargs)
        except EnvelopeError as exc:
            die(exc.exit_code, exc.label, str(exc), hint=exc.hint)
        except Exception as exc:
            for exc_type, code, label, hint in _BUILTIN_FAILURES:
                if isinstance(exc, exc_type):
                    die(code, label, str(exc), hint=hint)
            logger.exception("Unhandled CLI exception")
            die(Exit.POLICY, "Unhandled", f"{type(exc).__name__}: {exc}")

    return _wrapped


__all__ = [
    "Exit",
    "ErrorEnvelope",
    "EnvelopeError",
    "BadInputError",
    "InvariantError",
    "PolicyError",
    "IOErrorEnvelope",
    "guard_cli",
    "die",
]
