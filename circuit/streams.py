"""circuit/streams.py

Fixed-capacity input streams.

A DataStream always spans its full declared capacity. Real records occupy a
prefix and the rest is zero padding; map and reduce visit every slot.
"""

from __future__ import annotations

from typing import Callable, Generic, Sequence, Tuple, TypeVar

from .api import CircuitAPI, CircuitSetupError

T = TypeVar("T")
U = TypeVar("U")

# Allocated capacities must be integral multiples of this
CAPACITY_QUANTUM = 32


def check_capacities(max_receipts: int, max_storage: int, max_transactions: int) -> Tuple[int, int, int]:
    """
    Validate declared capacities.

    Receipts and storage must be positive multiples of 32, transactions must be
    zero or a positive multiple of 32.

    Raises:
        CircuitSetupError: on the first violated constraint
    """
    for name, value in (("max_receipts", max_receipts), ("max_storage", max_storage)):
        if not isinstance(value, int) or value <= 0:
            raise CircuitSetupError(f"{name} must be a positive integer, got {value!r}")
        if value % CAPACITY_QUANTUM != 0:
            raise CircuitSetupError(f"{name} must be a multiple of {CAPACITY_QUANTUM}, got {value}")

    if not isinstance(max_transactions, int) or max_transactions < 0:
        raise CircuitSetupError(f"max_transactions must be a non-negative integer, got {max_transactions!r}")
    if max_transactions % CAPACITY_QUANTUM != 0:
        raise CircuitSetupError(f"max_transactions must be a multiple of {CAPACITY_QUANTUM}, got {max_transactions}")

    return max_receipts, max_storage, max_transactions


class DataStream(Generic[T]):
    """Read-only, indexable view over a padded record sequence."""

    def __init__(self, api: CircuitAPI, items: Sequence[T], capacity: int):
        if len(items) != capacity:
            raise CircuitSetupError(f"Stream holds {len(items)} items, declared capacity is {capacity}")
        self._api = api
        self._items: Tuple[T, ...] = tuple(items)
        self.capacity = capacity

    def __len__(self) -> int:
        return self.capacity

    def get(self, index: int) -> T:
        """Constant-time access to slot ``index``."""
        if not 0 <= index < self.capacity:
            raise CircuitSetupError(f"Index {index} outside stream capacity {self.capacity}")
        return self._items[index]

    def map(self, fn: Callable[[T], U]) -> "DataStream[U]":
        return DataStream(self._api, [fn(item) for item in self._items], self.capacity)

    def reduce(self, fn: Callable[[U, T], U], initial: U) -> U:
        acc = initial
        for item in self._items:
            acc = fn(acc, item)
        return acc

    def sum(self) -> int:
        """Range-checked Uint248 sum over every slot."""
        return self.reduce(self._api.add, 0)
