"""Tests for BrowserSignal, WaKitError and best_effort."""
import pytest

from wa_kit.engine.errors import BrowserSignal, VersionNotAvailableError, WaKitError, best_effort


def test_signal_values():
    assert [s.value for s in BrowserSignal] == ["version_unavailable"]


def test_error_with_message():
    err = WaKitError(BrowserSignal.VERSION_UNAVAILABLE, "cache empty")
    assert err.signal == BrowserSignal.VERSION_UNAVAILABLE
    assert str(err) == "cache empty"


def test_error_default_message():
    assert str(WaKitError(BrowserSignal.VERSION_UNAVAILABLE)) == "version_unavailable"


def test_version_not_available_is_wakit_error():
    err = VersionNotAvailableError("2.2412.x")
    assert isinstance(err, WaKitError)
    assert err.signal == BrowserSignal.VERSION_UNAVAILABLE
    assert "2.2412.x" in str(err)


def test_best_effort_discards_exceptions():
    ran = []
    with best_effort("something optional"):
        ran.append(1)
        raise RuntimeError("ignored")
    assert ran == [1]


def test_best_effort_lets_base_exceptions_through():
    with pytest.raises(KeyboardInterrupt):
        with best_effort("interrupted"):
            raise KeyboardInterrupt
