"""User-facing notices raised by the core.

Screens supply their own ``Notifier``; the default only logs.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Callback signature for user notices.

    ``blocking`` notices interrupt the user (export failures); transient ones
    must not interrupt editing (autosave failures).
    """

    def notify(self, title: str, message: str, *, blocking: bool = False) -> None:
        pass


class LoggingNotifier:
    """Notifier that writes notices to the log."""

    def notify(self, title: str, message: str, *, blocking: bool = False) -> None:
        level = logging.ERROR if blocking else logging.INFO
        logger.log(level, "%s: %s", title, message)
