"""wa-kit — Playwright primitives for driving a WhatsApp Web session.

Launches or attaches to Chromium, prepares the controlled page (user agent,
stealth, service-worker guard), optionally pins the WhatsApp Web version,
injects the client API and reports loading-screen progress.
"""
from .browser.session import WhatsAppSession, init_browser, open_whatsapp  # noqa: F401
from .config import CreateConfig, ProxySettings, WhatsAppConfig, WHATSAPP  # noqa: F401
from .engine.errors import BrowserSignal, WaKitError, VersionNotAvailableError  # noqa: F401
