"""Bridge WhatsApp Web's loading screen (progress bar + status text) to Python.

A MutationObserver inside the page reports ``(percent, message)`` through an
exposed binding. Duplicates are filtered twice: by the observer's own
closure state in the page, and by the watcher on the host side. The page
fires many mutation batches per visible change, so both filters stay.
"""
import logging
from typing import Callable

from ..config import WHATSAPP, WhatsAppConfig
from ..engine.errors import best_effort

log = logging.getLogger(__name__)

LoadingScreenCallback = Callable[[object, str], object]

XPATH_HELPER = """
window.getElementByXpath = function (path) {
    return document.evaluate(
        path, document, null, XPathResult.FIRST_ORDERED_NODE_TYPE, null
    ).singleNodeValue;
};
"""

# Evaluated as a function expression; Playwright passes the selectors arg.
OBSERVER_SCRIPT = """
(selectors) => {
    let lastPercent = null;
    let lastMessage = null;

    const observer = new MutationObserver(() => {
        const progressBar = window.getElementByXpath(selectors.progress);
        const progressMessage = window.getElementByXpath(selectors.message);
        if (!progressBar) {
            return;
        }
        const percent = progressBar.value;
        const message = progressMessage ? progressMessage.innerText : '';
        if (percent !== lastPercent || message !== lastMessage) {
            lastPercent = percent;
            lastMessage = message;
            window[selectors.binding](percent, message);
        }
    });

    observer.observe(document, {
        attributes: true,
        childList: true,
        characterData: true,
        subtree: true,
    });
}
"""


class LoadingScreenWatcher:
    """Host side of the loading-screen bridge for one page.

    The last forwarded ``(percent, message)`` pair lives on the instance, so
    concurrent sessions in one process never suppress each other's updates.
    """

    def __init__(self, callback: LoadingScreenCallback | None = None,
                 config: WhatsAppConfig = WHATSAPP):
        self._callback = callback
        self._config = config
        self._last: tuple[object, str] | None = None
        self.forwarded = 0

    @property
    def last(self) -> tuple[object, str] | None:
        return self._last

    def handle(self, percent, message: str) -> bool:
        """Forward *percent*/*message* unless it repeats the last pair."""
        pair = (percent, message)
        if pair == self._last:
            return False
        self._last = pair
        self.forwarded += 1
        log.debug("Loading screen: %s%% %s", percent, message)
        if self._callback is not None:
            self._callback(percent, message)
        return True

    def start(self, page) -> "LoadingScreenWatcher":
        """Install the XPath helper, the binding and the observer on *page*."""
        page.evaluate(XPATH_HELPER)

        # Re-exposing an existing binding raises; the first one stays live.
        with best_effort(f"exposing {self._config.loading_binding}"):
            page.expose_function(self._config.loading_binding, self.handle)

        page.evaluate(OBSERVER_SCRIPT, {
            "progress": self._config.progress_xpath,
            "message": self._config.progress_message_xpath,
            "binding": self._config.loading_binding,
        })
        return self


def on_loading_screen(page, callback: LoadingScreenCallback | None = None,
                      config: WhatsAppConfig = WHATSAPP) -> LoadingScreenWatcher:
    """Start watching the loading screen of *page*; returns the watcher."""
    return LoadingScreenWatcher(callback, config).start(page)
