"""Per-key serialization of read-modify-write units of work.

Carts and orders live in a shared in-memory store and are mutated both by
request handlers and by the delivery timer thread. Every mutating command
is processed while holding the lock for its key (``cart:<user_id>`` or
``order:<order_id>``), so two writers never interleave on the same
aggregate. Different keys never block each other.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from threading import RLock

from protean.utils.globals import current_domain


class KeyedLocks:
    """Lazily created re-entrant lock per key."""

    def __init__(self) -> None:
        self._guard = RLock()
        self._locks: dict[str, RLock] = {}

    def lock_for(self, key: str) -> RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = RLock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self.lock_for(key):
            yield


# One lock per cart and order ever touched; grows with the in-memory store.
_locks = KeyedLocks()


def cart_key(user_id: str) -> str:
    return f"cart:{user_id}"


def order_key(order_id: str) -> str:
    return f"order:{order_id}"


def serialized(key: str):
    """Context manager holding the lock for ``key``."""
    return _locks.hold(key)


def process_serialized(key: str, command):
    """Process ``command`` synchronously while holding the lock for ``key``."""
    with _locks.hold(key):
        return current_domain.process(command, asynchronous=False)
