"""Local catalog of cached WhatsApp Web root documents.

The cache directory holds one ``<version>.html`` file per version, e.g.
``2.2412.54.html``. Version specs accept what npm semver ranges and PEP 440
both express:

* an exact version (``2.2412.54``) or ``latest``/``*``
* a partial version or ``x`` wildcard (``2.2412``, ``2.2412.x``)
* caret and tilde ranges (``^2.2412.0``, ``~2.2412.0``)
* comparator sets, space or comma separated (``>=2.2412.0 <2.2413.0``)
* hyphen ranges (``2.2410.0 - 2.2412.54``) and ``||`` alternatives
"""
import logging
import os
import re

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from ..engine.errors import VersionNotAvailableError

log = logging.getLogger(__name__)

_SUFFIX = ".html"
_ANY = ("", "*", "x", "X", "latest")
_WILDCARDS = ("x", "X", "*")
_COMPARATORS = ("===", "==", "!=", "~=", ">=", "<=", ">", "<")

_HYPHEN_RANGE = re.compile(r"(\S+)\s+-\s+(\S+)")
_LOOSE_OPERATOR = re.compile(r"(===|==|!=|~=|>=|<=|[<>=^~])\s+")


def _release(version: str) -> tuple[list[int], bool]:
    """Numeric parts of *version* and whether it was partial or wildcarded."""
    parts = version.lstrip("vV").split(".")
    wildcard = False
    while parts and parts[-1] in _WILDCARDS:
        parts.pop()
        wildcard = True
    try:
        numbers = [int(p) for p in parts]
    except ValueError:
        raise InvalidSpecifier(f"not a version: {version!r}") from None
    if not numbers:
        raise InvalidSpecifier(f"not a version: {version!r}")
    return numbers, wildcard or len(numbers) < 3


def _join(numbers: list[int]) -> str:
    return ".".join(str(n) for n in numbers)


def _caret(version: str) -> list[str]:
    # ^2.2412.0 -> >=2.2412.0,<3 ; ^0.3.1 -> >=0.3.1,<0.4
    numbers, _ = _release(version)
    upper = list(numbers)
    for i, n in enumerate(upper):
        if n != 0 or i == len(upper) - 1:
            upper = upper[:i] + [n + 1]
            break
    return [f">={_join(numbers)}", f"<{_join(upper)}"]


def _tilde(version: str) -> list[str]:
    # ~2.2412.0 -> >=2.2412.0,<2.2413 ; ~2 -> >=2,<3
    numbers, _ = _release(version)
    upper = [numbers[0], numbers[1] + 1] if len(numbers) > 1 else [numbers[0] + 1]
    return [f">={_join(numbers)}", f"<{_join(upper)}"]


def _term(term: str) -> list[str]:
    """One npm/PEP 440 comparator as PEP 440 specifier strings."""
    if term in _ANY:
        return []
    if term.startswith(_COMPARATORS):
        return [term]
    if term.startswith("^"):
        return _caret(term[1:])
    if term.startswith("~"):
        return _tilde(term[1:])
    if term.startswith("="):
        term = term[1:]
    if term.startswith(("v", "V")) and term[1:2].isdigit():
        term = term[1:]
    numbers, partial = _release(term)
    if partial:
        return [f"=={_join(numbers)}.*"]
    return [f"=={term}"]


def to_specifier(spec: str) -> SpecifierSet | None:
    """Translate one version range into a SpecifierSet; None means "any"."""
    spec = spec.strip()
    if spec in _ANY:
        return None
    spec = _HYPHEN_RANGE.sub(r">=\1 <=\2", spec)
    spec = _LOOSE_OPERATOR.sub(r"\1", spec)
    specifiers = [s for term in re.split(r"[,\s]+", spec) if term for s in _term(term)]
    if not specifiers:
        return None
    return SpecifierSet(",".join(specifiers))


class VersionCatalog:
    """Resolves version specs to cached documents under *cache_dir*."""

    def __init__(self, cache_dir: str):
        self._cache_dir = cache_dir

    def _scan(self) -> dict[Version, str]:
        """Cached version -> file name. Unparseable names are skipped."""
        if not os.path.isdir(self._cache_dir):
            return {}
        found: dict[Version, str] = {}
        for name in os.listdir(self._cache_dir):
            if not name.endswith(_SUFFIX):
                continue
            try:
                found[Version(name[: -len(_SUFFIX)])] = name
            except InvalidVersion:
                log.debug(f"VersionCatalog: skipping {name}")
        return found

    def versions(self) -> list[Version]:
        """Every cached version, oldest first."""
        return sorted(self._scan())

    def latest(self) -> Version | None:
        versions = self.versions()
        return versions[-1] if versions else None

    def resolve(self, spec: str) -> Version:
        """Highest cached version matching *spec*; ``||`` separates alternatives."""
        try:
            specifiers = [to_specifier(alt) for alt in spec.split("||")]
        except InvalidSpecifier as e:
            raise VersionNotAvailableError(spec, f"invalid version spec {spec!r}: {e}") from e
        candidates = self.versions()
        if None not in specifiers:
            candidates = [v for v in candidates if any(s.contains(v, prereleases=True) for s in specifiers)]
        if not candidates:
            raise VersionNotAvailableError(spec)
        return candidates[-1]

    def path_for(self, version: Version) -> str:
        name = self._scan().get(version, f"{version}{_SUFFIX}")
        return os.path.join(self._cache_dir, name)

    def get_page_content(self, spec: str) -> str:
        """Body of the root document for the best match of *spec*."""
        version = self.resolve(spec)
        with open(self.path_for(version), "r", encoding="utf-8") as f:
            return f.read()
