"""Prepare the controlled page and load WhatsApp Web into it.

Order matters: the user agent and the service-worker guard must be in place
before the first navigation, and version pinning must route the root
document before ``goto`` requests it.
"""
import logging
import weakref
from typing import Callable

from ..browser.ua import set_user_agent
from ..config import WHATSAPP, WhatsAppConfig
from .versions import VersionCatalog

log = logging.getLogger(__name__)

LogCallback = Callable[..., object]

# Runs on every new document of the page, before WhatsApp's own scripts.
SERVICE_WORKER_GUARD = """
(() => {
    if (navigator.serviceWorker) {
        navigator.serviceWorker
            .getRegistrations()
            .then((registrations) => {
                for (const registration of registrations) {
                    registration.unregister();
                }
            })
            .catch(() => null);

        // Registration attempts hang forever instead of installing a worker.
        navigator.serviceWorker.register = () => new Promise(() => {});
    }

    setInterval(() => {
        window.onerror = console.error;
        window.onunhandledrejection = console.error;
    }, 500);
})();
"""

ABORT = "abort"
CONTINUE = "continue"
FULFILL = "fulfill"


def _emit(log_cb: LogCallback | None, level: str, message: str, meta: dict | None = None):
    if log_cb is not None:
        log_cb(level, message, meta)
        return
    py_level = {"error": logging.ERROR, "warn": logging.WARNING}.get(level, logging.DEBUG)
    log.log(py_level, message)


def unregister_service_worker(page) -> None:
    """Drop existing service workers and block new ones on every document load."""
    page.add_init_script(SERVICE_WORKER_GUARD)


def classify_request(url: str, config: WhatsAppConfig = WHATSAPP) -> str:
    """Decide what the pinning route does with a request to *url*."""
    if url.startswith(config.check_update_url):
        return ABORT
    if url != config.root_url:
        return CONTINUE
    return FULFILL


class VersionRoute:
    """Route handler serving a cached root document instead of the live one."""

    def __init__(self, body: str, config: WhatsAppConfig = WHATSAPP):
        self.body = body
        self.config = config

    def __call__(self, route, request=None):
        url = route.request.url
        action = classify_request(url, self.config)
        if action == ABORT:
            route.abort()
        elif action == CONTINUE:
            route.continue_()
        else:
            log.debug("Serving pinned WhatsApp WEB document for %s", url)
            route.fulfill(status=200, content_type="text/html", body=self.body)


# One pinning route per page.
_installed_routes: "weakref.WeakKeyDictionary[object, VersionRoute]" = weakref.WeakKeyDictionary()


def set_whatsapp_version(
    page,
    version: str,
    log: LogCallback | None = None,
    catalog: VersionCatalog | None = None,
    config: WhatsAppConfig = WHATSAPP,
) -> VersionRoute | None:
    """Force the page to load a specific WhatsApp WEB version.

    *version* is an exact version or a version expression understood by
    :class:`VersionCatalog`. When it cannot be resolved an error is logged
    and the live (latest) version loads as usual; nothing is routed.
    """
    body = None
    if catalog is not None:
        try:
            body = catalog.get_page_content(version)
        except Exception as e:
            _emit(log, "debug", f"Version lookup for {version} failed: {e}")

    if not body:
        _emit(log, "error", f"Version not available for {version}, using latest as fallback")
        return None

    previous = _installed_routes.pop(page, None)
    if previous is not None:
        page.unroute("**/*", previous)

    handler = VersionRoute(body, config)
    page.route("**/*", handler)
    _installed_routes[page] = handler
    return handler


def init_whatsapp(
    page,
    version: str | None = None,
    log: LogCallback | None = None,
    catalog: VersionCatalog | None = None,
    config: WhatsAppConfig = WHATSAPP,
):
    """Set the user agent, block service workers, optionally pin, then navigate.

    Navigation runs without a timeout; errors from ``goto`` propagate.
    Returns *page*.
    """
    set_user_agent(page)
    unregister_service_worker(page)

    if version:
        _emit(log, "verbose", f"Setting WhatsApp WEB version to {version}")
        set_whatsapp_version(page, version, log, catalog=catalog, config=config)

    _emit(log, "verbose", "Loading WhatsApp WEB")
    page.goto(config.url, wait_until="load", timeout=0, referer=config.referer)
    _emit(log, "verbose", "WhatsApp WEB loaded")
    return page
