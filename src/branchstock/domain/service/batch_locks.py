"""Per-batch serialization of mutating operations.

Every operation that writes a batch or its stock rows (allocate, adjust,
release, transfer, minimum-stock and batch updates) must hold that batch's
lock for the whole read-check-write cycle.  Different batches never contend
with each other.

Registering or renaming a batch holds its product's lock instead, so that
batch-number uniqueness is checked and written in one step.
"""

from __future__ import annotations

import threading
import weakref
from collections.abc import Hashable, Iterator
from contextlib import contextmanager


class BatchLockRegistry:

    def __init__(self) -> None:
        self._guard = threading.Lock()
        # An entry lives only while some caller holds a reference to its lock.
        self._locks: weakref.WeakValueDictionary[Hashable, threading.RLock] = (
            weakref.WeakValueDictionary()
        )

    def lock_for(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            return lock

    def __len__(self) -> int:
        return len(self._locks)

    @contextmanager
    def hold(self, batch_id: str) -> Iterator[None]:
        """Hold the lock of *batch_id* for the duration of the block.

        Re-entrant, so a service may call another locked operation on the
        same batch from inside the block.
        """
        with self.lock_for(batch_id):
            yield

    @contextmanager
    def hold_product(self, product_id: str) -> Iterator[None]:
        with self.lock_for(("product", product_id)):
            yield
