"""
Request Tracker

Counts backend requests in flight so views can show a global loading state.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List

Subscriber = Callable[[int], None]


class RequestTracker:
    """Pending-request counter with change subscribers"""

    def __init__(self):
        self._pending = 0
        self._subscribers: List[Subscriber] = []
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def pending(self) -> int:
        return self._pending

    @property
    def is_loading(self) -> bool:
        return self._pending > 0

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback(pending)``; returns a function that unsubscribes it"""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @contextmanager
    def track(self) -> Iterator[None]:
        self._change(1)
        try:
            yield
        finally:
            self._change(-1)

    def _change(self, delta: int):
        self._pending += delta
        for callback in list(self._subscribers):
            try:
                callback(self._pending)
            except Exception:  # pylint: disable=broad-except
                self._logger.exception("Request tracker subscriber failed")
