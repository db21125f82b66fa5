"""Structured JSONL event logging for browser sessions."""
import json
import logging
import os
import time

log = logging.getLogger(__name__)

# Session log levels mapped onto stdlib logging.
_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "http": logging.INFO,
    "verbose": logging.DEBUG,
    "debug": logging.DEBUG,
    "silly": logging.DEBUG,
}


class SessionEventLogger:
    """Writes one JSON line per event to a per-session JSONL file.

    Instances are callable with the ``log(level, message, meta=None)``
    signature that :func:`wa_kit.whatsapp.loader.init_whatsapp` accepts, so
    one object both feeds the caller's logging and leaves an event trail.

    All logging is best-effort — methods never raise exceptions.
    Supports context-manager protocol for automatic close.
    """

    def __init__(self, session: str, log_dir: str = "data/logs/sessions"):
        self._session = session
        self._f = None
        try:
            os.makedirs(log_dir, exist_ok=True)
            safe_session = session.replace("/", "_").replace("\\", "_")
            path = os.path.join(log_dir, f"{safe_session}.jsonl")
            self._f = open(path, "a", encoding="utf-8")
        except Exception as e:
            log.warning(f"SessionEventLogger: failed to open log file: {e}")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __call__(self, level: str, message: str, meta: dict | None = None):
        log.log(_LEVELS.get(level, logging.INFO), "[%s] %s", self._session, message)
        event = {"event": "log", "level": level, "message": message}
        if meta:
            event["meta"] = meta
        self._write(event)

    def _write(self, event: dict):
        if self._f is None:
            return
        try:
            event["ts"] = time.time()
            event["session"] = self._session
            self._f.write(json.dumps(event, ensure_ascii=False, default=str) + "\n")
            self._f.flush()
        except Exception as e:
            log.warning(f"SessionEventLogger: write failed: {e}")

    def log_browser_start(self, mode: str, args: list[str] | None = None):
        """``mode`` is ``local``, ``persistent`` or ``remote``."""
        self._write({"event": "browser_start", "mode": mode, "args": args or []})

    def log_loading_screen(self, percent, message: str):
        """Loading-screen progress; usable directly as the progress callback."""
        self._write({"event": "loading_screen", "percent": percent, "message": message})

    def log_session_end(self, status: str = "ok", duration: float | None = None):
        self._write({"event": "session_end", "status": status, "duration": duration})

    def close(self):
        if self._f is not None:
            try:
                self._f.flush()
                self._f.close()
            except Exception:
                pass
            self._f = None
