"""User-Agent override applied to every controlled page."""
import logging

log = logging.getLogger(__name__)

CHROME_VERSION = "124.0.0.0"

_WINDOWS_TEMPLATE = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/{version} Safari/537.36"
)


def build_user_agent(chrome_version: str = CHROME_VERSION, template: str = "") -> str:
    """Build a desktop Chrome User-Agent string for *chrome_version*."""
    return (template or _WINDOWS_TEMPLATE).format(version=chrome_version)


# Same value for every session; must not reveal HeadlessChrome.
USER_AGENT = build_user_agent()


def set_user_agent(page, context=None, user_agent: str = USER_AGENT):
    """Override the page's User-Agent.

    Uses ``Network.setUserAgentOverride`` over a CDP session so that
    ``navigator.userAgent`` changes too. Returns the CDP session (keep it
    referenced — detaching drops the override), or ``None`` when CDP is
    unavailable and only the request header could be replaced.
    """
    context = context if context is not None else page.context
    try:
        cdp = context.new_cdp_session(page)
        cdp.send("Network.setUserAgentOverride", {"userAgent": user_agent})
        return cdp
    except Exception as e:
        log.warning("CDP user agent override failed (%s); setting header only", e)
    # Header only; navigator.userAgent keeps the engine value.
    context.set_extra_http_headers({"User-Agent": user_agent})
    return None
