"""Anti-automation shim for the controlled page.

Installed before any page script runs so WhatsApp Web never observes the
automation defaults (``navigator.webdriver``, empty plugin list, missing
``window.chrome``, headless brand in ``userAgentData``).
"""
import json
import logging

from .ua import CHROME_VERSION

log = logging.getLogger(__name__)


def build_stealth_shim(
    chrome_version: str = CHROME_VERSION,
    *,
    platform: str = "Windows",
    languages: tuple[str, ...] = ("en-US", "en"),
    hardware_concurrency: int = 8,
) -> str:
    """Return the JS source of the shim, parameterized for a desktop profile."""
    major_js = json.dumps(chrome_version.split(".")[0])
    platform_js = json.dumps(platform)
    languages_js = json.dumps(list(languages))
    return f"""
    (() => {{
        const define = (obj, prop, value) => {{
            try {{
                Object.defineProperty(obj, prop, {{ get: () => value, configurable: true }});
            }} catch (e) {{}}
        }};

        define(Navigator.prototype, 'webdriver', undefined);
        define(navigator, 'languages', {languages_js});
        define(navigator, 'hardwareConcurrency', {hardware_concurrency});
        define(navigator, 'vendor', "Google Inc.");

        // -- plugins: headless reports an empty list --
        if (!navigator.plugins || navigator.plugins.length === 0) {{
            const fakePlugins = [
                {{ name: "PDF Viewer", filename: "internal-pdf-viewer" }},
                {{ name: "Chrome PDF Viewer", filename: "internal-pdf-viewer" }},
            ];
            define(navigator, 'plugins', fakePlugins);
        }}

        // -- window.chrome is missing in headless --
        if (!window.chrome) {{
            window.chrome = {{ runtime: {{}}, app: {{ isInstalled: false }} }};
        }}

        // -- userAgentData must not advertise HeadlessChrome --
        const brands = [
            {{ brand: "Chromium", version: {major_js} }},
            {{ brand: "Google Chrome", version: {major_js} }},
            {{ brand: "Not-A.Brand", version: "99" }},
        ];
        if (navigator.userAgentData) {{
            define(navigator, 'userAgentData', {{
                brands: brands,
                mobile: false,
                platform: {platform_js},
                getHighEntropyValues: (hints) => Promise.resolve({{
                    brands: brands, mobile: false, platform: {platform_js},
                }}),
                toJSON: () => ({{ brands: brands, mobile: false, platform: {platform_js} }}),
            }});
        }}

        // -- notifications permission query mismatch --
        if (navigator.permissions && navigator.permissions.query) {{
            const origQuery = navigator.permissions.query.bind(navigator.permissions);
            navigator.permissions.query = (desc) => (
                desc && desc.name === 'notifications'
                    ? Promise.resolve({{ state: Notification.permission, onchange: null }})
                    : origQuery(desc)
            );
        }}
    }})();
    """


def install_stealth(page, context=None, chrome_version: str = CHROME_VERSION, **shim_kwargs):
    """Register the shim to run before page JS on every document load.

    Prefers ``Page.addScriptToEvaluateOnNewDocument`` over CDP and returns the
    session (must stay alive — detaching removes registered scripts). Falls
    back to ``page.add_init_script`` and returns ``None``.
    """
    source = build_stealth_shim(chrome_version, **shim_kwargs)
    context = context if context is not None else page.context
    try:
        cdp = context.new_cdp_session(page)
        cdp.send("Page.addScriptToEvaluateOnNewDocument", {"source": source})
        log.info("CDP stealth injection installed (pre-navigation)")
        return cdp
    except Exception as e:
        log.warning("CDP stealth injection failed (%s); using add_init_script", e)
    page.add_init_script(source)
    return None
