"""Error signals for browser sessions, plus the best-effort helper.

Fatal failures (launch, navigation, script injection, remote attach) are
never wrapped here — the Playwright/OS exception reaches the caller as is.
"""
import logging
from contextlib import contextmanager
from enum import Enum

log = logging.getLogger(__name__)


class BrowserSignal(Enum):
    """Recoverable conditions wa-kit reports itself.

    Fatal failures are not listed: they surface as the original exception.
    """
    VERSION_UNAVAILABLE = "version_unavailable"  # no cached document for a version spec


class WaKitError(Exception):
    """Exception carrying a BrowserSignal."""

    def __init__(self, signal: BrowserSignal, message: str = ""):
        self.signal = signal
        super().__init__(message or signal.value)


class VersionNotAvailableError(WaKitError):
    """Raised by the version catalog when a spec matches no cached document."""

    def __init__(self, version: str, message: str = ""):
        self.version = version
        super().__init__(
            BrowserSignal.VERSION_UNAVAILABLE,
            message or f"no cached WhatsApp Web document for {version!r}",
        )


@contextmanager
def best_effort(what: str):
    """Run the block, logging and discarding any ``Exception`` it raises.

    Only for work whose failure must not affect the session: re-exposing a
    page binding, probing for already-injected globals, temp dir cleanup.
    """
    try:
        yield
    except Exception as e:
        log.debug("%s failed (ignored): %s", what, e)
