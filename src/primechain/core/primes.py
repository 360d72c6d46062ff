"""Prime helpers used to size chained hash tables."""

from __future__ import annotations


def is_prime(n: int) -> bool:
    """Trial-division primality test over odd divisors up to ``sqrt(n)``."""

    if n in (2, 3):
        return True
    if n < 2 or n % 2 == 0:
        return False
    i = 3
    while i * i <= n:
        if n % i == 0:
            return False
        i += 2
    return True


def next_prime(n: int) -> int:
    """Return the smallest prime >= ``n`` reachable by scanning odd candidates."""

    if n % 2 == 0:
        n += 1
    while not is_prime(n):
        n += 2
    return n


__all__ = ["is_prime", "next_prime"]
