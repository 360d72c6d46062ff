"""Separate-chaining hash table with prime-sized buckets and a timing harness."""

from . import bench, contracts, core, io
from .core import ChainedHashTable, is_prime, next_prime
from .models import Movie

__version__ = "0.1.0"

__all__ = [
    "ChainedHashTable",
    "Movie",
    "bench",
    "contracts",
    "core",
    "io",
    "is_prime",
    "next_prime",
]
