"""Chrome discovery, launch-argument merging, and local launch.

Windows is supported for discovery only through ``PATH``; the well-known
install locations are checked on macOS and Linux.
"""
import atexit
import logging
import os
import platform
import shutil
import tempfile
from typing import Any

from ..config import CHROMIUM_ARGS, CreateConfig, ProxySettings
from ..engine.errors import best_effort

log = logging.getLogger(__name__)

_MAC_CANDIDATES = (
    "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome",
    "/Applications/Google Chrome Canary.app/Contents/MacOS/Google Chrome Canary",
    "/Applications/Chromium.app/Contents/MacOS/Chromium",
)
_PATH_CANDIDATES = (
    "google-chrome",
    "google-chrome-stable",
    "chromium-browser",
    "chromium",
    "chrome",
)

# Temp dirs already scheduled for removal at interpreter exit.
_cleanup_registered: set[str] = set()


def find_system_chrome() -> str | None:
    """Return the path of an installed Chrome/Chromium, or None."""
    if platform.system() == "Darwin":
        for candidate in _MAC_CANDIDATES:
            if os.path.isfile(candidate):
                return candidate
    for candidate in _PATH_CANDIDATES:
        path = shutil.which(candidate)
        if path:
            return path
    return None


def get_browser_arg_value(args: list[str] | None, name: str) -> str | None:
    """Return the first argument mentioning *name* (e.g. ``proxy-server``)."""
    if not args:
        return None
    return next((a for a in args if name in a), None)


def remove_browser_arg(args: list[str] | None, name: str) -> list[str]:
    """Return a copy of *args* without any argument mentioning *name*."""
    if not args:
        return []
    return [a for a in args if name not in a]


def build_launch_args(
    browser_args: list[str] | None,
    proxy_url: str = "",
) -> list[str]:
    """Merge caller arguments with the hardened defaults and the env proxy.

    Caller-supplied *browser_args* replace :data:`CHROMIUM_ARGS` entirely.
    A non-empty *proxy_url* wins over any configured ``--proxy-server``.
    """
    args = list(browser_args) if browser_args else list(CHROMIUM_ARGS)
    if proxy_url:
        args = remove_browser_arg(args, "proxy-server")
        args.append(f"--proxy-server={proxy_url}")
    return args


# Only profiles created by make_temp_profile carry this prefix.
PROFILE_PREFIX = "wa_kit_profile-"


def make_temp_profile() -> str:
    """Create a throwaway profile dir under the system temp root."""
    return tempfile.mkdtemp(prefix=PROFILE_PREFIX)


def is_temp_profile(path: str) -> bool:
    """True if *path* is a profile dir created by :func:`make_temp_profile`.

    Caller-chosen profiles under the temp root do not qualify: they may hold
    a paired WhatsApp login.
    """
    if not path:
        return False
    tmp_root = os.path.realpath(tempfile.gettempdir())
    rel = os.path.relpath(os.path.realpath(path), tmp_root)
    if rel == "." or rel.startswith(os.pardir):
        return False
    return rel.split(os.sep)[0].startswith(PROFILE_PREFIX)


def _remove_user_data_dir(path: str) -> None:
    with best_effort(f"removing user data dir {path}"):
        shutil.rmtree(path)


def register_user_data_cleanup(user_data_dir: str) -> bool:
    """Schedule removal of a temporary *user_data_dir* at interpreter exit.

    Anything but a :func:`make_temp_profile` dir is never touched. Returns
    whether a hook was registered (at most once per directory).
    """
    if not is_temp_profile(user_data_dir):
        return False
    key = os.path.realpath(user_data_dir)
    if key in _cleanup_registered:
        return False
    _cleanup_registered.add(key)
    atexit.register(_remove_user_data_dir, key)
    log.debug("Registered exit cleanup for %s", key)
    return True


def build_launch_options(
    options: CreateConfig,
    proxy: ProxySettings,
    executable_path: str | None = None,
) -> dict[str, Any]:
    """Keyword arguments for ``chromium.launch``/``launch_persistent_context``."""
    args = build_launch_args(options.browser_args, proxy.url)
    headless = options.headless
    if options.devtools:
        # Playwright has no devtools option any more; the switch implies a window.
        headless = False
        if "--auto-open-devtools-for-tabs" not in args:
            args.append("--auto-open-devtools-for-tabs")
    launch_kwargs: dict[str, Any] = {"headless": headless, "args": args}
    if executable_path:
        launch_kwargs["executable_path"] = executable_path
    launch_kwargs.update(options.launch_options)
    return launch_kwargs


def launch_local_browser(
    playwright,
    options: CreateConfig,
    proxy: ProxySettings,
    executable_path: str | None = None,
):
    """Start a new Chromium process.

    Returns a ``Browser``, or a ``BrowserContext`` when a profile dir is in
    use (``user_data_dir``, or a fresh one with ``temp_profile``; Playwright
    only accepts a profile dir through a persistent context). Launch errors
    propagate unchanged.
    """
    launch_kwargs = build_launch_options(options, proxy, executable_path)
    log.info(
        "Launching %s with %d args",
        os.path.basename(executable_path) if executable_path else "bundled Chromium",
        len(launch_kwargs["args"]),
    )
    user_data_dir = options.user_data_dir
    if not user_data_dir and options.temp_profile:
        user_data_dir = make_temp_profile()
    if not user_data_dir:
        return playwright.chromium.launch(**launch_kwargs)

    os.makedirs(user_data_dir, exist_ok=True)
    context = playwright.chromium.launch_persistent_context(
        user_data_dir=user_data_dir,
        **launch_kwargs,
    )
    register_user_data_cleanup(user_data_dir)
    return context
