"""Simulated delivery-partner assignment.

A few seconds after an order is placed, a partner picked at random from
the configured roster is assigned to it. Each scheduled assignment is an
``AssignmentHandle`` running on a daemon ``threading.Timer``; it fires at
most once and can be cancelled before it does. Nothing is persisted and
nothing is retried: a failed assignment is logged and dropped.

Use ``get_scheduler()`` / ``set_scheduler()`` to swap the scheduler, e.g.
for one that never starts timers in tests.
"""

import random
from collections.abc import Callable, Sequence
from threading import Event, RLock, Timer

import structlog
from protean.utils.globals import current_domain

from grocery.config import get_settings
from grocery.domain import grocery
from grocery.order.assignment import AssignDeliveryPartner
from grocery.utils.locks import order_key, serialized

logger = structlog.get_logger(__name__)


class AssignmentHandle:
    """One pending partner assignment for one order."""

    def __init__(
        self,
        order_id: str,
        delay: float,
        roster: Sequence[str],
        on_done: Callable[["AssignmentHandle"], None] | None = None,
    ) -> None:
        self.order_id = order_id
        self.delay = delay
        self.partner_name: str | None = None
        self.error: Exception | None = None
        self._roster = tuple(roster)
        self._on_done = on_done
        self._cancelled = Event()
        self._done = Event()
        self._timer: Timer | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def start(self) -> None:
        self._timer = Timer(self.delay, self.fire)
        self._timer.daemon = True
        self._timer.start()

    def cancel(self) -> None:
        """Invalidate the handle. A firing that has not yet assigned becomes a no-op."""
        self._cancelled.set()
        if self._timer is not None:
            self._timer.cancel()

    def fire(self) -> str | None:
        """Assign a random partner unless cancelled. Returns the assigned name.

        Runs on the timer thread, so it pushes its own domain context and
        never lets an exception escape.
        """
        try:
            with grocery.domain_context(), serialized(order_key(self.order_id)):
                # Checked under the order lock so a manual assignment that
                # cancelled this handle is never overwritten afterwards.
                if self.cancelled:
                    return None
                partner = random.choice(self._roster)
                current_domain.process(
                    AssignDeliveryPartner(order_id=self.order_id, partner_name=partner),
                    asynchronous=False,
                )
                self.partner_name = partner
        except Exception as exc:
            self.error = exc
            logger.error(
                "Delivery partner assignment failed",
                order_id=self.order_id,
                error=str(exc),
            )
        finally:
            self._done.set()
            if self._on_done is not None:
                self._on_done(self)
        return self.partner_name

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the handle has fired. Returns False on timeout."""
        return self._done.wait(timeout)


class DeliveryScheduler:
    """Keeps at most one pending assignment per order."""

    def __init__(
        self,
        delay: float | None = None,
        roster: Sequence[str] | None = None,
        autostart: bool = True,
    ) -> None:
        self._delay = delay
        self._roster = tuple(roster) if roster is not None else None
        self.autostart = autostart
        self._handles: dict[str, AssignmentHandle] = {}
        self._lock = RLock()

    @property
    def delay(self) -> float:
        return self._delay if self._delay is not None else get_settings().assignment_delay_seconds

    @property
    def roster(self) -> tuple[str, ...]:
        return self._roster if self._roster is not None else get_settings().delivery_partners

    def schedule(self, order_id: str) -> AssignmentHandle:
        """Schedule an assignment, replacing any pending one for the same order."""
        order_id = str(order_id)
        handle = AssignmentHandle(order_id, self.delay, self.roster, on_done=self._forget)
        with self._lock:
            previous = self._handles.get(order_id)
            if previous is not None:
                previous.cancel()
            self._handles[order_id] = handle

        if self.autostart:
            handle.start()

        logger.info("Delivery assignment scheduled", order_id=order_id, delay_seconds=handle.delay)
        return handle

    def cancel(self, order_id: str) -> bool:
        """Cancel the pending assignment for an order. Returns False when none was pending."""
        with self._lock:
            handle = self._handles.pop(str(order_id), None)
        if handle is None or handle.done:
            return False

        handle.cancel()
        logger.info("Delivery assignment cancelled", order_id=str(order_id))
        return True

    def pending(self, order_id: str) -> AssignmentHandle | None:
        with self._lock:
            handle = self._handles.get(str(order_id))
        if handle is None or handle.done or handle.cancelled:
            return None
        return handle

    def cancel_all(self) -> None:
        with self._lock:
            handles = list(self._handles.values())
            self._handles.clear()
        for handle in handles:
            handle.cancel()

    def _forget(self, handle: AssignmentHandle) -> None:
        with self._lock:
            if self._handles.get(handle.order_id) is handle:
                del self._handles[handle.order_id]


_current_scheduler: DeliveryScheduler | None = None


def get_scheduler() -> DeliveryScheduler:
    """Return the current delivery scheduler. Defaults to a timer-backed one."""
    global _current_scheduler
    if _current_scheduler is None:
        _current_scheduler = DeliveryScheduler()
    return _current_scheduler


def set_scheduler(scheduler: DeliveryScheduler) -> None:
    """Override the active scheduler (useful for tests)."""
    global _current_scheduler
    _current_scheduler = scheduler


def reset_scheduler() -> None:
    """Cancel everything pending and fall back to the default scheduler."""
    global _current_scheduler
    if _current_scheduler is not None:
        _current_scheduler.cancel_all()
    _current_scheduler = None
