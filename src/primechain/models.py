"""Movie records loaded from the dataset CSV."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple


@dataclass(eq=False)
class Movie:
    """A single movie row.

    Two movies are equal when their names match case-insensitively. Sorting is by
    rating ascending, then by name (case-insensitive).
    """

    name: str = ""
    year: int = 0
    duration: str = ""
    genre: str = ""
    rating: float = 0.0
    description: str = ""
    director: str = ""
    stars: str = ""

    def _name_key(self) -> str:
        return self.name.casefold()

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, Movie):
            return NotImplemented
        return self._name_key() == other._name_key()

    def __hash__(self) -> int:
        return hash(self._name_key())

    def _sort_key(self) -> Tuple[float, str]:
        return (self.rating, self._name_key())

    # Ordering is by sort key only; it never falls back to name equality.
    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Movie):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Movie):
            return NotImplemented
        return self._sort_key() <= other._sort_key()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Movie):
            return NotImplemented
        return self._sort_key() > other._sort_key()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Movie):
            return NotImplemented
        return self._sort_key() >= other._sort_key()

    def __str__(self) -> str:
        return (
            f"{self.name} ({self.year}), {self.duration} - {self.genre} - {self.rating}"
            f" | {self.description} | Directed by: {self.director} | Stars: {self.stars}"
        )

    def copy(self) -> Movie:
        return replace(self)


__all__ = ["Movie"]
