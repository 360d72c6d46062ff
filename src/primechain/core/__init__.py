from .primes import is_prime, next_prime
from .table import DEFAULT_CAPACITY, ChainedHashTable

__all__ = [
    "ChainedHashTable",
    "DEFAULT_CAPACITY",
    "is_prime",
    "next_prime",
]
