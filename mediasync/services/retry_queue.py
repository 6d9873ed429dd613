"""FIFO work queue with a per-run retry budget."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Dict, Generic, Hashable, Iterable, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Requeued(Generic[T]):
    """Item was pushed back to the tail for another attempt."""

    item: T
    retry: int


@dataclass(frozen=True)
class Exhausted(Generic[T]):
    """Item used its whole retry budget in this run."""

    item: T
    retries: int


Deferred = Union[Requeued[T], Exhausted[T]]


class RetryQueue(Generic[T]):
    """Deferred retries go to the tail, never back to the head.

    Attempt counts live only as long as the queue, so every run starts each
    item with a fresh budget.
    """

    def __init__(self, items: Iterable[T], max_retries: int, key=lambda item: item):
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        self.max_retries = max_retries
        self._key = key
        self._queue: deque[T] = deque(items)
        self._retries: Dict[Hashable, int] = {}
        self.popped = 0

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)

    def pop(self) -> Optional[T]:
        if not self._queue:
            return None
        self.popped += 1
        return self._queue.popleft()

    @property
    def total(self) -> int:
        """Items handed out so far plus items still queued."""
        return self.popped + len(self._queue)

    def retries(self, item: T) -> int:
        return self._retries.get(self._key(item), 0)

    def defer(self, item: T) -> Deferred[T]:
        """Requeue a failed item if it still has budget left."""
        key = self._key(item)
        retried = self._retries.get(key, 0)
        if retried < self.max_retries:
            self._retries[key] = retried + 1
            self._queue.append(item)
            return Requeued(item, retried + 1)
        return Exhausted(item, retried)
