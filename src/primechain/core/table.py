from __future__ import annotations

import logging
from collections.abc import Hashable, Iterator
from typing import Generic, List, TypeVar

from .primes import is_prime, next_prime

logger = logging.getLogger("primechain")

DEFAULT_CAPACITY: int = 101

K = TypeVar("K", bound=Hashable)


class ChainedHashTable(Generic[K]):
    """Set of unique keys backed by separate chaining over a prime-sized bucket array.

    Keys must hash consistently with their equality. The table grows to the next
    prime >= twice its length once the stored key count exceeds the bucket count.
    """

    __slots__ = ("_buckets", "_size", "_rehashes")

    def __init__(self, capacity_hint: int = DEFAULT_CAPACITY) -> None:
        self._buckets: List[List[K]] = [[] for _ in range(next_prime(max(capacity_hint, 1)))]
        self._size = 0
        self._rehashes = 0

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: object) -> bool:
        return self.contains(key)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[K]:
        for chain in self._buckets:
            yield from chain

    def __repr__(self) -> str:
        return f"ChainedHashTable(size={self._size}, capacity={self.capacity})"

    @property
    def size(self) -> int:
        return self._size

    @property
    def capacity(self) -> int:
        return len(self._buckets)

    @property
    def rehash_count(self) -> int:
        return self._rehashes

    def load_factor(self) -> float:
        return self._size / len(self._buckets)

    def _bucket_of(self, key: K) -> int:
        # A positive modulus keeps Python's % inside [0, capacity).
        return hash(key) % len(self._buckets)

    def insert(self, key: K) -> None:
        chain = self._buckets[self._bucket_of(key)]
        if key in chain:
            return
        chain.append(key)
        self._size += 1
        if self._size > len(self._buckets):
            self._rehash()

    def contains(self, key: K) -> bool:
        return key in self._buckets[self._bucket_of(key)]

    def remove(self, key: K) -> None:
        chain = self._buckets[self._bucket_of(key)]
        if key in chain:
            chain.remove(key)
            self._size -= 1

    def clear(self) -> None:
        """Empty every chain in place; the bucket count is left untouched."""

        for chain in self._buckets:
            chain.clear()
        self._size = 0

    def _rehash(self) -> None:
        old = self._buckets
        self._buckets = [[] for _ in range(next_prime(2 * len(old)))]
        self._size = 0
        for chain in old:
            for key in chain:
                self.insert(key)
        self._rehashes += 1
        logger.debug(
            "Rehashed %d keys: %d -> %d buckets", self._size, len(old), len(self._buckets)
        )

    def chain_lengths(self) -> List[int]:
        return [len(chain) for chain in self._buckets]

    def max_chain_len(self) -> int:
        return max(self.chain_lengths(), default=0)

    def check_invariants(self) -> List[str]:
        """Return a description of every structural problem found (empty when healthy)."""

        problems: List[str] = []
        capacity = len(self._buckets)
        if not is_prime(capacity):
            problems.append(f"capacity {capacity} is not prime")
        stored = sum(self.chain_lengths())
        if stored != self._size:
            problems.append(f"size {self._size} != stored keys {stored}")
        seen: set[K] = set()
        for idx, chain in enumerate(self._buckets):
            for key in chain:
                if key in seen:
                    problems.append(f"duplicate key {key!r}")
                seen.add(key)
                expected = self._bucket_of(key)
                if expected != idx:
                    problems.append(f"key {key!r} in bucket {idx}, expected {expected}")
        return problems


__all__ = ["ChainedHashTable", "DEFAULT_CAPACITY"]
