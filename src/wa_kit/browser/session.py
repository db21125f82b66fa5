"""Browser acquisition and the full WhatsApp Web session lifecycle.

The framework never hides the Playwright instance — the app layer starts
``sync_playwright()`` and passes it in. All paths are runtime-injected.
"""
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from ..config import CreateConfig, ProxySettings

log = logging.getLogger(__name__)


@dataclass
class WhatsAppSession:
    """Handles yielded by :func:`open_whatsapp`."""
    session: str
    browser: Any           # Browser, or BrowserContext for a persistent profile
    page: Any
    watcher: Any = None    # LoadingScreenWatcher, None if the API was already there
    remote: bool = False


def init_browser(
    playwright,
    session: str,
    options: CreateConfig,
    logger: logging.Logger | None = None,
    proxy: ProxySettings | None = None,
):
    """Launch a local browser or attach to ``options.browser_ws``.

    Returns a ``Browser`` (or a ``BrowserContext`` when ``user_data_dir`` is
    set). Launch and attach errors propagate; there is no retry.
    """
    from .chrome import find_system_chrome, launch_local_browser
    from .remote import connect_remote_browser

    logger = logger or log
    proxy = proxy if proxy is not None else ProxySettings.from_env()

    executable_path = None
    if options.use_chrome:
        executable_path = find_system_chrome()
        if not executable_path:
            logger.warning(
                "Chrome not found, using chromium",
                extra={"session": session, "type": "browser"},
            )

    if options.browser_ws:
        return connect_remote_browser(playwright, options.browser_ws)

    return launch_local_browser(playwright, options, proxy, executable_path)


@contextmanager
def open_whatsapp(
    playwright,
    session: str,
    options: CreateConfig,
    *,
    on_loading_screen=None,
    log_callback=None,
    logger: logging.Logger | None = None,
):
    """Open a browser, load WhatsApp Web and inject the client API.

    Yields a :class:`WhatsAppSession`. On exit a locally launched browser is
    closed; a remote one is only disconnected. When *log_callback* is a
    :class:`~wa_kit.telemetry.SessionEventLogger` the browser start and the
    session end are recorded as events too.
    """
    from .chrome import build_launch_args
    from .pages import get_or_create_page
    from .stealth import install_stealth
    from ..telemetry.logger import SessionEventLogger
    from ..whatsapp.inject import inject_api
    from ..whatsapp.loader import init_whatsapp
    from ..whatsapp.versions import VersionCatalog

    logger = logger or log
    events = log_callback if isinstance(log_callback, SessionEventLogger) else None
    proxy = ProxySettings.from_env()
    started = time.monotonic()

    browser = init_browser(playwright, session, options, logger=logger, proxy=proxy)
    remote = bool(options.browser_ws)
    if events is not None:
        if remote:
            events.log_browser_start("remote")
        else:
            mode = "persistent" if options.user_data_dir or options.temp_profile else "local"
            events.log_browser_start(mode, build_launch_args(options.browser_args, proxy.url))
    status = "error"
    try:
        page = get_or_create_page(browser, proxy)
        install_stealth(page)
        catalog = VersionCatalog(options.version_cache_dir) if options.version_cache_dir else None
        init_whatsapp(
            page,
            version=options.whatsapp_version,
            log=log_callback,
            catalog=catalog,
        )
        watcher = inject_api(
            page,
            on_loading_screen,
            wa_js_path=options.wa_js_path,
            wapi_js_path=options.wapi_js_path,
        )
        logger.info(f"Session {session} ready in {time.monotonic() - started:.1f}s")
        yield WhatsAppSession(session, browser, page, watcher, remote)
        status = "ok"
    finally:
        try:
            browser.close()
        except Exception as e:
            logger.warning(f"Failed to close browser cleanly: {e}")
        if events is not None:
            events.log_session_end(status, time.monotonic() - started)
