"""Runtime configuration for a WhatsApp Web browser session.

Everything here is plain data. Paths (script bundles, version cache, user
data dir) are runtime-injected — never derived from package location.
"""
import os
from dataclasses import dataclass, field
from typing import Any, Mapping

# Default hardened Chromium switches used when the caller passes no args.
CHROMIUM_ARGS: tuple[str, ...] = (
    "--disable-web-security",
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--aggressive-cache-discard",
    "--disable-cache",
    "--disable-application-cache",
    "--disable-offline-load-stale-cache",
    "--disk-cache-size=0",
    "--disable-background-networking",
    "--disable-default-apps",
    "--disable-extensions",
    "--disable-sync",
    "--disable-translate",
    "--hide-scrollbars",
    "--metrics-recording-only",
    "--mute-audio",
    "--no-first-run",
    "--safebrowsing-disable-auto-update",
    "--ignore-certificate-errors",
    "--ignore-ssl-errors",
    "--ignore-certificate-errors-spki-list",
    "--disable-blink-features=AutomationControlled",
    "--disable-infobars",
)


@dataclass(frozen=True)
class WhatsAppConfig:
    """Fixed facts about the target web application."""
    url: str = "https://web.whatsapp.com"
    referer: str = "https://whatsapp.com/"
    # Loading screen: progress bar and the status text rendered next to it.
    progress_xpath: str = "//*[@id='app']/div/div/div[2]/progress"
    progress_message_xpath: str = "//*[@id='app']/div/div/div[3]"
    # Globals the client API leaves behind once it is active.
    api_globals: tuple[str, ...] = ("WAPI", "Store")
    loading_binding: str = "loadingScreen"

    @property
    def root_url(self) -> str:
        """URL of the root document request (what the browser actually asks for)."""
        return f"{self.url}/"

    @property
    def check_update_url(self) -> str:
        return f"{self.url}/check-update"


WHATSAPP = WhatsAppConfig()


@dataclass(frozen=True)
class ProxySettings:
    """Proxy overrides sourced from ``PROXY_URL`` / ``PROXY_USER`` / ``PROXY_PWD``."""
    url: str = ""
    username: str = ""
    password: str = ""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ProxySettings":
        env = os.environ if environ is None else environ
        return cls(
            url=env.get("PROXY_URL", ""),
            username=env.get("PROXY_USER", ""),
            password=env.get("PROXY_PWD", ""),
        )

    @property
    def credentials(self) -> tuple[str, str] | None:
        """``(username, password)`` when both are set, else None."""
        if self.username and self.password:
            return self.username, self.password
        return None


@dataclass
class CreateConfig:
    """Options consumed by :func:`wa_kit.browser.session.init_browser` and friends.

    ``launch_options`` is passed through untouched and merged last into the
    Playwright launch call, so it can override anything derived here.
    """
    use_chrome: bool = True
    browser_args: list[str] | None = None
    browser_ws: str = ""
    headless: bool = True
    devtools: bool = False
    user_data_dir: str = ""
    # Fresh throwaway profile, removed at exit; ignored when user_data_dir is set.
    temp_profile: bool = False
    launch_options: dict[str, Any] = field(default_factory=dict)

    whatsapp_version: str | None = None
    version_cache_dir: str = ""
    wa_js_path: str = ""
    wapi_js_path: str = ""
