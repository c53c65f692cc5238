"""
Notification Service

Turns outcomes and errors into user-visible notifications.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Deque, List, Optional

from kampyn.infrastructure.utilities.exceptions import ErrorReporter, KampynError
from kampyn.infrastructure.utilities.constants import ErrorCodes


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Notifier:
    """
    Collects notifications for the presentation layer.

    A ``sink`` callable receives every notification as it is emitted; the
    most recent ones are also kept in ``history``.
    """

    def __init__(
        self,
        sink: Optional[Callable[[Notification], None]] = None,
        history_size: int = 50,
    ):
        self._sink = sink
        self._history: Deque[Notification] = deque(maxlen=history_size)
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def history(self) -> List[Notification]:
        return list(self._history)

    @property
    def last(self) -> Optional[Notification]:
        return self._history[-1] if self._history else None

    def success(self, message: str) -> Notification:
        return self._emit(NotificationLevel.SUCCESS, message)

    def info(self, message: str) -> Notification:
        return self._emit(NotificationLevel.INFO, message)

    def error(self, message: str) -> Notification:
        return self._emit(NotificationLevel.ERROR, message)

    def notify_error(self, error: Exception, operation: str) -> Notification:
        """Report ``error`` and show its user message"""
        if isinstance(error, KampynError):
            ErrorReporter.report_user_error(error, operation)
            return self.error(error.user_message)
        ErrorReporter.report_critical_error(error)
        return self.error(ErrorCodes.GENERIC_ERROR_MESSAGE)

    def _emit(self, level: NotificationLevel, message: str) -> Notification:
        notification = Notification(level, message)
        self._history.append(notification)
        log_level = logging.WARNING if level is NotificationLevel.ERROR else logging.INFO
        self._logger.log(log_level, "🔔 %s: %s", level.value.upper(), message)
        if self._sink is not None:
            self._sink(notification)
        return notification
