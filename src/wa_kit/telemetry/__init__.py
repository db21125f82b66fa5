"""telemetry — per-session JSONL event trail."""
from .logger import SessionEventLogger  # noqa: F401
