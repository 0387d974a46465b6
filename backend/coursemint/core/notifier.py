"""Learner notifications, passed explicitly into services.

Services never look a notifier up on their own: routers obtain one through
``get_notifier`` and hand it down, and tests pass a recording stub.
"""

import logging
import uuid
from typing import Protocol

logger = logging.getLogger("coursemint.notify")


class Notifier(Protocol):
    def notify(self, user_id: uuid.UUID, kind: str, message: str) -> None: ...


class LogNotifier:
    """Writes notifications to the ``coursemint.notify`` logger."""

    def notify(self, user_id: uuid.UUID, kind: str, message: str) -> None:
        level = logging.WARNING if kind == "error" else logging.INFO
        logger.log(level, "user=%s kind=%s message=%s", user_id, kind, message)


_default_notifier = LogNotifier()


def get_notifier() -> Notifier:
    """FastAPI dependency; override in tests to capture notifications."""
    return _default_notifier
