import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Toaster(Protocol):
    """Short-lived feedback shown to the guest after a submission."""

    def success(self, title: str, description: str | None = None) -> None: ...

    def error(self, title: str, description: str | None = None) -> None: ...


class LoggingToaster:
    """Toaster for headless use: feedback goes to the log."""

    def success(self, title: str, description: str | None = None) -> None:
        logger.info(f"{title} {description or ''}".strip())

    def error(self, title: str, description: str | None = None) -> None:
        logger.error(f"{title} {description or ''}".strip())
