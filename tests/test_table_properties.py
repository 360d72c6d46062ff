from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

from hypothesis import given, settings, strategies as st

from primechain.core import ChainedHashTable, is_prime


@dataclass(frozen=True)
class CollidingKey:
    """Key whose hash intentionally collides with peers for stress testing."""

    value: int

    def __hash__(self) -> int:  # pragma: no cover - trivial wrapper
        return 0

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"CK({self.value})"


def _key_strategy() -> st.SearchStrategy[Any]:
    small_ints = st.integers(-20, 20)
    colliding = st.builds(CollidingKey, st.integers(-10, 10))
    titles = st.text(alphabet="abcXYZ ", max_size=4)
    return st.one_of(small_ints, colliding, titles)


def _operation_strategy() -> st.SearchStrategy[Tuple[str, Any]]:
    key = _key_strategy()
    return st.one_of(
        st.tuples(st.just("insert"), key),
        st.tuples(st.just("remove"), key),
        st.tuples(st.just("contains"), key),
        st.tuples(st.just("clear"), st.none()),
    )


@settings(max_examples=150, deadline=None)
@given(st.integers(-3, 12), st.lists(_operation_strategy(), min_size=1, max_size=120))
def test_table_behaves_like_set(capacity_hint: int, operations: list[Tuple[str, Any]]) -> None:
    table: ChainedHashTable[Any] = ChainedHashTable(capacity_hint)
    model: set[Any] = set()
    seen_keys: set[Any] = set()

    for op, key in operations:
        capacity_before = table.capacity
        if op == "insert":
            seen_keys.add(key)
            table.insert(key)
            model.add(key)
        elif op == "remove":
            seen_keys.add(key)
            table.remove(key)
            model.discard(key)
        elif op == "clear":
            table.clear()
            model.clear()
            assert table.capacity == capacity_before
        else:  # contains
            seen_keys.add(key)
            assert table.contains(key) is (key in model)

        # Size mirrors the oracle.
        assert len(table) == len(model)

        # Growth only ever lands on a prime at least twice as large.
        assert is_prime(table.capacity)
        if table.capacity != capacity_before:
            assert table.capacity >= 2 * capacity_before

        # Every seen key resolves identically.
        for candidate in seen_keys:
            assert table.contains(candidate) is (candidate in model)

    assert set(table) == model
    assert table.check_invariants() == []


@settings(max_examples=75, deadline=None)
@given(st.lists(st.text(max_size=12), max_size=200).flatmap(
    lambda keys: st.tuples(st.just(keys), st.permutations(keys))
))
def test_insertion_order_does_not_change_membership(data: Tuple[list[str], list[str]]) -> None:
    keys, shuffled = data
    first: ChainedHashTable[str] = ChainedHashTable(5)
    second: ChainedHashTable[str] = ChainedHashTable(5)
    for key in keys:
        first.insert(key)
    for key in shuffled:
        second.insert(key)

    assert len(first) == len(second) == len(set(keys))
    assert set(first) == set(second)
    for key in keys:
        assert first.contains(key) and second.contains(key)


@settings(max_examples=75, deadline=None)
@given(st.sets(st.integers(), max_size=300), st.integers(1, 50))
def test_every_key_survives_rehashing(keys: set[int], capacity_hint: int) -> None:
    table: ChainedHashTable[int] = ChainedHashTable(capacity_hint)
    for key in keys:
        table.insert(key)
        table.insert(key)
    assert len(table) == len(keys)
    assert all(table.contains(key) for key in keys)
    assert table.load_factor() <= 1.0
