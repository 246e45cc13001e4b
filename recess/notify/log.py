"""Notifier that writes to the log.

Library API for headless embeddings of SessionTimeout. The pygame runtime uses
ToastNotifier instead.
"""

import logging

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Headless notifier, used when no window is available."""

    def show_warning(self, message: str, duration_ms: int) -> None:
        logger.warning("%s (shown for %d ms)", message, duration_ms)

    def show_expired(self, message: str, duration_ms: int) -> None:
        logger.error("%s (shown for %d ms)", message, duration_ms)
