"""Per-entity locks that linearize transitions on a single aggregate.

A transition holds the lock of every aggregate it mutates for the whole
read-check-write-commit cycle of its command. Keys are namespaced strings
(``order:<id>``, ``wand:<id>``, ``payment:<reference>``). Locks are acquired
in the order given; callers take an order's lock, then its wand's, then the
payment reference's.

Example:
    with entity_locks.hold(order_key(order_id), wand_key(wand_id)):
        current_domain.process(PayOrder(order_id=order_id), asynchronous=False)
"""

from __future__ import annotations

import threading
from contextlib import ExitStack, contextmanager

import structlog

from storefront.exceptions import StorefrontError

logger = structlog.get_logger(__name__)

# Seconds to wait for a contended lock before giving up
DEFAULT_LOCK_TIMEOUT = 30.0


class LockError(StorefrontError):
    """Raised when a lock cannot be acquired in time."""

    kind = "resource_busy"
    status_code = 503


class _Entry:
    __slots__ = ("lock", "holders")

    def __init__(self):
        self.lock = threading.Lock()
        self.holders = 0


class KeyedLocks:
    """A registry of non-reentrant locks, created on demand per key.

    Entries are dropped once nobody holds or waits for them, so the registry
    does not grow with the number of orders ever processed.
    """

    def __init__(self, timeout: float = DEFAULT_LOCK_TIMEOUT):
        self.timeout = timeout
        self._guard = threading.Lock()
        self._entries: dict[str, _Entry] = {}

    def _checkout(self, key: str) -> _Entry:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.holders += 1
            return entry

    def _checkin(self, key: str, entry: _Entry) -> None:
        with self._guard:
            entry.holders -= 1
            if entry.holders == 0:
                self._entries.pop(key, None)

    @contextmanager
    def _hold_one(self, key: str):
        entry = self._checkout(key)
        try:
            if not entry.lock.acquire(timeout=self.timeout):
                logger.warning("Timed out waiting for entity lock", key=key, timeout=self.timeout)
                raise LockError(f"Timed out waiting for {key}", key=key)
            try:
                yield
            finally:
                entry.lock.release()
        finally:
            self._checkin(key, entry)

    @contextmanager
    def hold(self, *keys: str):
        """Hold the locks for ``keys`` (duplicates and ``None`` are skipped)."""
        seen = []
        for key in keys:
            if key is not None and key not in seen:
                seen.append(key)

        with ExitStack() as stack:
            for key in seen:
                stack.enter_context(self._hold_one(key))
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


def order_key(order_id) -> str:
    return f"order:{order_id}"


def wand_key(wand_id) -> str | None:
    return f"wand:{wand_id}" if wand_id else None


def payment_key(payment_reference) -> str | None:
    """Guards uniqueness of a payment reference across orders."""
    return f"payment:{payment_reference.strip()}" if payment_reference else None


entity_locks = KeyedLocks()
