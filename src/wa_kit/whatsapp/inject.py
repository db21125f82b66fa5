"""Inject the client API bundles into a loaded WhatsApp Web page."""
import logging

from ..config import WHATSAPP, WhatsAppConfig
from ..engine.errors import best_effort
from .loading_screen import LoadingScreenCallback, LoadingScreenWatcher

log = logging.getLogger(__name__)

# Defaults applied to wa-js right after it loads.
WA_JS_SETUP = """
() => {
    WPP.chat.defaultSendMessageOptions.createChat = true;
    WPP.conn.setKeepAlive(true);
}
"""


def _injected_check(config: WhatsAppConfig) -> str:
    checks = " && ".join(f"typeof window.{name} !== 'undefined'" for name in config.api_globals)
    return f"() => {checks}"


def is_api_injected(page, config: WhatsAppConfig = WHATSAPP) -> bool:
    """True if every client API global already exists; evaluation errors mean False."""
    injected = False
    with best_effort("probing for injected client API"):
        injected = bool(page.evaluate(_injected_check(config)))
    return injected


def inject_api(
    page,
    on_loading_screen: LoadingScreenCallback | None = None,
    *,
    wa_js_path: str,
    wapi_js_path: str,
    config: WhatsAppConfig = WHATSAPP,
) -> LoadingScreenWatcher | None:
    """Load wa-js and the wapi bundle, then start the loading-screen watcher.

    A page that already exposes the client API is left untouched and
    ``None`` is returned. Script errors propagate.
    """
    if is_api_injected(page, config):
        log.debug("Client API already present, skipping injection")
        return None

    page.add_script_tag(path=wa_js_path)
    page.evaluate(WA_JS_SETUP)
    page.add_script_tag(path=wapi_js_path)
    log.info("Client API injected")

    return LoadingScreenWatcher(on_loading_screen, config).start(page)
