"""Load Movie records from the dataset CSV."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List, Sequence

from primechain.contracts.error import BadInputError
from primechain.models import Movie

logger = logging.getLogger("primechain")

MOVIE_FIELD_COUNT = 8
CSV_HINT = "Expected columns: name,year,duration,genre,rating,description,director,stars"


def _parse_int(raw: str) -> int:
    try:
        return int(raw.strip())
    except ValueError:
        return 0


def _parse_float(raw: str) -> float:
    try:
        return float(raw.strip())
    except ValueError:
        return 0.0


def movie_from_fields(fields: Sequence[str]) -> Movie:
    """Build a Movie from eight positional CSV fields (quotes are dropped)."""

    name, year, duration, genre, rating, description, director, stars = (
        f.replace('"', "") for f in fields
    )
    return Movie(
        name=name,
        year=_parse_int(year),
        duration=duration,
        genre=genre,
        rating=_parse_float(rating),
        description=description,
        director=director,
        stars=stars,
    )


def split_fields(line: str) -> list[str]:
    """Split a CSV line on commas outside quotes.

    A double quote anywhere in a field toggles quoting and is dropped, so
    ``Star Wars "IV, A New Hope"`` stays one field.
    """

    fields: list[str] = []
    current: list[str] = []
    quoted = False
    for ch in line:
        if ch == '"':
            quoted = not quoted
        elif ch == "," and not quoted:
            fields.append("".join(current))
            current.clear()
        else:
            current.append(ch)
    fields.append("".join(current))
    return fields


def _decode(raw: bytes, line_no: int) -> str:
    try:
        return raw.decode("utf-8-sig" if line_no == 1 else "utf-8")
    except UnicodeDecodeError as exc:
        raise BadInputError(
            f"line {line_no}: not valid UTF-8 ({exc.reason})",
            hint="Re-encode the dataset as UTF-8.",
        ) from exc


def iter_movies(path: str | Path, limit: int) -> Iterator[Movie]:
    """Yield up to ``limit`` movies, skipping the header row."""

    with open(path, "rb") as f:
        count = 0
        for line_no, raw in enumerate(f, start=1):
            if line_no == 1:
                continue
            if count >= limit:
                break
            line = _decode(raw, line_no).rstrip("\r\n")
            if not line.strip():
                continue
            row = split_fields(line)
            if len(row) > MOVIE_FIELD_COUNT:
                raise BadInputError(
                    f"line {line_no}: expected at most {MOVIE_FIELD_COUNT} fields, got {len(row)}",
                    hint=CSV_HINT,
                )
            if len(row) < MOVIE_FIELD_COUNT:
                missing = MOVIE_FIELD_COUNT - len(row)
                logger.debug("line %d: padding %d missing field(s)", line_no, missing)
                row = row + [""] * missing
            yield movie_from_fields(row)
            count += 1


def read_movies(path: str | Path, limit: int) -> List[Movie]:
    movies = list(iter_movies(path, limit))
    logger.info("Loaded %d movies from %s", len(movies), path)
    return movies


__all__ = ["MOVIE_FIELD_COUNT", "iter_movies", "movie_from_fields", "read_movies", "split_fields"]
