"""Pick the controlled page of a browser and authenticate it against the proxy."""
import logging

from ..config import ProxySettings

log = logging.getLogger(__name__)


def _existing_pages(browser) -> list:
    # A persistent context exposes pages directly; a Browser through contexts.
    if hasattr(browser, "contexts"):
        return [p for ctx in browser.contexts for p in ctx.pages]
    return list(browser.pages)


class ProxyAuthenticator:
    """Answers proxy auth challenges of one page over CDP.

    Chromium sends the CONNECT request for HTTPS origins itself, so the
    credentials have to go through ``Fetch.authRequired`` rather than a
    request header. Server (non-proxy) challenges get the default handling.
    Keep the instance referenced — detaching the session stops the answers.
    """

    def __init__(self, cdp, username: str, password: str):
        self._cdp = cdp
        self._username = username
        self._password = password

    def install(self) -> "ProxyAuthenticator":
        self._cdp.on("Fetch.requestPaused", self._on_request_paused)
        self._cdp.on("Fetch.authRequired", self._on_auth_required)
        self._cdp.send("Fetch.enable", {
            "handleAuthRequests": True,
            "patterns": [{"urlPattern": "*"}],
        })
        return self

    def _on_request_paused(self, event: dict):
        self._cdp.send("Fetch.continueRequest", {"requestId": event["requestId"]})

    def _on_auth_required(self, event: dict):
        challenge = event.get("authChallenge") or {}
        if challenge.get("source") == "Proxy":
            response = {
                "response": "ProvideCredentials",
                "username": self._username,
                "password": self._password,
            }
        else:
            response = {"response": "Default"}
        self._cdp.send("Fetch.continueWithAuth", {
            "requestId": event["requestId"],
            "authChallengeResponse": response,
        })


def authenticate_page(page, username: str, password: str, context=None) -> ProxyAuthenticator:
    """Make *page* answer proxy auth challenges with *username*/*password*."""
    context = context if context is not None else page.context
    cdp = context.new_cdp_session(page)
    return ProxyAuthenticator(cdp, username, password).install()


def get_or_create_page(browser, proxy: ProxySettings | None = None):
    """Return the first open page of *browser*, opening one if there is none.

    *browser* is a ``Browser`` or a ``BrowserContext``. When proxy credentials
    are configured the page is authenticated before it ever navigates.
    """
    pages = _existing_pages(browser)
    if pages:
        page = pages[0]
    else:
        page = browser.new_page()

    proxy = proxy if proxy is not None else ProxySettings.from_env()
    if proxy.credentials:
        authenticate_page(page, *proxy.credentials)
        log.debug("Proxy credentials applied to page")
    return page
