"""browser — Playwright browser acquisition and page primitives.

Zero WhatsApp-specific knowledge beyond the default launch args.
"""
from .chrome import build_launch_args, find_system_chrome, launch_local_browser  # noqa: F401
from .pages import get_or_create_page  # noqa: F401
from .remote import connect_remote_browser, resolve_remote_transport  # noqa: F401
from .session import WhatsAppSession, init_browser, open_whatsapp  # noqa: F401
from .stealth import build_stealth_shim, install_stealth  # noqa: F401
from .ua import USER_AGENT, build_user_agent, set_user_agent  # noqa: F401
