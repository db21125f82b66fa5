"""Tests for remote DevTools endpoint resolution."""
import io
import json
from unittest.mock import MagicMock

import pytest

from wa_kit.browser import remote
from wa_kit.browser.remote import (
    TRANSPORT_TIMEOUT_MS,
    connect_remote_browser,
    resolve_remote_transport,
    version_url,
)


def test_version_url_rewrites_scheme():
    assert version_url("ws://127.0.0.1:9222") == "http://127.0.0.1:9222/json/version"
    assert version_url("wss://host/browser") == "https://host/browser/json/version"


def test_direct_connect_wins():
    playwright = MagicMock()
    browser = resolve_remote_transport(playwright, "ws://host:9222")
    assert browser is playwright.chromium.connect_over_cdp.return_value
    playwright.chromium.connect_over_cdp.assert_called_once_with(
        "ws://host:9222", timeout=TRANSPORT_TIMEOUT_MS
    )


def test_fallback_uses_advertised_endpoint(monkeypatch):
    playwright = MagicMock()
    browser = MagicMock()
    playwright.chromium.connect_over_cdp.side_effect = [RuntimeError("handshake"), browser]

    def fake_urlopen(url, timeout):
        assert url == "http://host:9222/json/version"
        assert timeout == 10
        body = json.dumps({"webSocketDebuggerUrl": "ws://host:9222/devtools/browser/abc"})
        return io.BytesIO(body.encode("utf-8"))

    monkeypatch.setattr(remote.urllib.request, "urlopen", fake_urlopen)

    assert connect_remote_browser(playwright, "ws://host:9222") is browser
    second = playwright.chromium.connect_over_cdp.call_args_list[1]
    assert second.args == ("ws://host:9222/devtools/browser/abc",)
    assert second.kwargs == {"timeout": TRANSPORT_TIMEOUT_MS}


def test_both_attempts_fail_raises_first_error(monkeypatch):
    playwright = MagicMock()
    first = RuntimeError("direct connect failed")
    second = RuntimeError("fallback connect failed")
    playwright.chromium.connect_over_cdp.side_effect = [first, second]
    body = json.dumps({"webSocketDebuggerUrl": "ws://host/devtools/browser/x"}).encode("utf-8")
    monkeypatch.setattr(remote.urllib.request, "urlopen", lambda url, timeout: io.BytesIO(body))

    with pytest.raises(RuntimeError) as excinfo:
        resolve_remote_transport(playwright, "ws://host")
    assert excinfo.value is first


def test_discovery_failure_raises_first_error(monkeypatch):
    playwright = MagicMock()
    first = ConnectionRefusedError("nope")
    playwright.chromium.connect_over_cdp.side_effect = first

    def broken_urlopen(url, timeout):
        raise OSError("http endpoint down")

    monkeypatch.setattr(remote.urllib.request, "urlopen", broken_urlopen)

    with pytest.raises(ConnectionRefusedError) as excinfo:
        resolve_remote_transport(playwright, "wss://host")
    assert excinfo.value is first
    assert playwright.chromium.connect_over_cdp.call_count == 1
