"""whatsapp — page preparation, version pinning, loading screen, API injection."""
from .inject import inject_api, is_api_injected  # noqa: F401
from .loader import (  # noqa: F401
    classify_request,
    init_whatsapp,
    set_whatsapp_version,
    unregister_service_worker,
)
from .loading_screen import LoadingScreenWatcher, on_loading_screen  # noqa: F401
from .versions import VersionCatalog  # noqa: F401
