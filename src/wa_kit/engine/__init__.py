"""engine — error taxonomy shared by the browser and whatsapp layers."""
from .errors import BrowserSignal, WaKitError, VersionNotAvailableError, best_effort  # noqa: F401
