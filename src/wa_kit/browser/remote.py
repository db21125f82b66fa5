"""Attach to an already running browser through its DevTools endpoint.

Playwright owns the DevTools transport, so the "transport" produced here is
the connected ``Browser`` returned by ``connect_over_cdp``.
"""
import json
import logging
import re
import urllib.request

log = logging.getLogger(__name__)

TRANSPORT_TIMEOUT_MS = 10_000
VERSION_PATH = "/json/version"

_WS_SCHEME = re.compile(r"^ws(s)?:", re.IGNORECASE)


def version_url(browser_ws: str) -> str:
    """``ws://host:port/x`` -> ``http://host:port/x/json/version`` (wss -> https)."""
    return _WS_SCHEME.sub(lambda m: f"http{m.group(1) or ''}:", browser_ws) + VERSION_PATH


def fetch_debugger_url(browser_ws: str, timeout: float = TRANSPORT_TIMEOUT_MS / 1000) -> str:
    """Ask the browser's HTTP endpoint for its advertised WebSocket URL."""
    url = version_url(browser_ws)
    with urllib.request.urlopen(url, timeout=timeout) as resp:
        data = json.loads(resp.read().decode("utf-8"))
    return data["webSocketDebuggerUrl"]


def resolve_remote_transport(playwright, browser_ws: str):
    """Connect to *browser_ws*, falling back to the ``/json/version`` endpoint.

    When both attempts fail the exception from the direct attempt is raised,
    not the one from the fallback.
    """
    try:
        return playwright.chromium.connect_over_cdp(browser_ws, timeout=TRANSPORT_TIMEOUT_MS)
    except Exception as e:
        first_error = e
        log.debug("Direct CDP connect to %s failed: %s", browser_ws, e)

    try:
        debugger_url = fetch_debugger_url(browser_ws)
        log.info("Retrying CDP connect via advertised endpoint %s", debugger_url)
        return playwright.chromium.connect_over_cdp(debugger_url, timeout=TRANSPORT_TIMEOUT_MS)
    except Exception as e:
        log.debug("CDP endpoint discovery for %s failed: %s", browser_ws, e)

    raise first_error


def connect_remote_browser(playwright, browser_ws: str):
    """Attach to a remote browser; see :func:`resolve_remote_transport`."""
    browser = resolve_remote_transport(playwright, browser_ws)
    log.info("Connected to remote browser at %s", browser_ws)
    return browser
