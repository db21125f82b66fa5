"""Tests for the local WhatsApp Web version catalog."""
import os

import pytest
from packaging.version import Version

from wa_kit.engine.errors import BrowserSignal, VersionNotAvailableError
from wa_kit.whatsapp.versions import VersionCatalog, to_specifier


@pytest.fixture
def cache_dir(tmp_path):
    for version in ("2.2410.1", "2.2412.7", "2.2412.54", "2.3000.1015"):
        (tmp_path / f"{version}.html").write_text(f"<html>{version}</html>", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")
    (tmp_path / "broken-name.html").write_text("ignored", encoding="utf-8")
    return str(tmp_path)


def test_versions_sorted(cache_dir):
    catalog = VersionCatalog(cache_dir)
    assert catalog.versions() == [
        Version("2.2410.1"), Version("2.2412.7"), Version("2.2412.54"), Version("2.3000.1015"),
    ]
    assert catalog.latest() == Version("2.3000.1015")


def test_resolve_exact(cache_dir):
    assert VersionCatalog(cache_dir).resolve("2.2412.7") == Version("2.2412.7")


def test_resolve_latest(cache_dir):
    catalog = VersionCatalog(cache_dir)
    assert catalog.resolve("latest") == Version("2.3000.1015")
    assert catalog.resolve("*") == Version("2.3000.1015")


def test_resolve_wildcard_picks_highest(cache_dir):
    assert VersionCatalog(cache_dir).resolve("2.2412.x") == Version("2.2412.54")


def test_resolve_specifier_set(cache_dir):
    assert VersionCatalog(cache_dir).resolve(">=2.2410,<2.2412.10") == Version("2.2412.7")


def test_resolve_missing_raises(cache_dir):
    with pytest.raises(VersionNotAvailableError) as excinfo:
        VersionCatalog(cache_dir).resolve("1.0.0")
    assert excinfo.value.signal == BrowserSignal.VERSION_UNAVAILABLE
    assert excinfo.value.version == "1.0.0"


def test_resolve_invalid_spec_raises(cache_dir):
    with pytest.raises(VersionNotAvailableError):
        VersionCatalog(cache_dir).resolve("~~nonsense")


def test_missing_cache_dir_is_empty(tmp_path):
    catalog = VersionCatalog(os.path.join(str(tmp_path), "missing"))
    assert catalog.versions() == []
    assert catalog.latest() is None
    with pytest.raises(VersionNotAvailableError):
        catalog.get_page_content("latest")


def test_get_page_content(cache_dir):
    assert VersionCatalog(cache_dir).get_page_content("2.2412.x") == "<html>2.2412.54</html>"


def test_to_specifier():
    assert to_specifier("latest") is None
    assert str(to_specifier("2.2412.x")) == "==2.2412.*"
    assert str(to_specifier("2.2412.54")) == "==2.2412.54"


@pytest.mark.parametrize("spec, expected", [
    ("2.2412", "2.2412.54"),
    ("2.2412.*", "2.2412.54"),
    ("^2.2412.0", "2.3000.1015"),
    ("~2.2412.0", "2.2412.54"),
    ("~2.2410.0", "2.2410.1"),
    (">=2.2412.0 <2.2413.0", "2.2412.54"),
    (">= 2.2412.0, < 2.2412.10", "2.2412.7"),
    ("2.2410.0 - 2.2412.7", "2.2412.7"),
    ("=2.2412.7", "2.2412.7"),
    ("v2.2412.7", "2.2412.7"),
    ("~=2.2412.0", "2.2412.54"),
    ("2.2410.x || 1.0.0", "2.2410.1"),
    ("1.0.0 || 2.2412.x", "2.2412.54"),
])
def test_resolve_semver_ranges(cache_dir, spec, expected):
    assert VersionCatalog(cache_dir).resolve(spec) == Version(expected)


def test_caret_and_tilde_upper_bounds():
    assert str(to_specifier("^2.2412.0")) == "<3,>=2.2412.0"
    assert str(to_specifier("^0.3.1")) == "<0.4,>=0.3.1"
    assert str(to_specifier("~2.2412.0")) == "<2.2413,>=2.2412.0"
    assert str(to_specifier("2.2412")) == "==2.2412.*"


def test_caret_excludes_next_major(tmp_path):
    for version in ("2.2412.7", "3.0.0"):
        (tmp_path / f"{version}.html").write_text(version, encoding="utf-8")
    assert VersionCatalog(str(tmp_path)).resolve("^2.2412.0") == Version("2.2412.7")
