"""Dependency specifiers: ``name@range`` and ``@scope/name@range``."""

from __future__ import annotations

from collections.abc import Iterable

from asini.errors import ParseError

# Range written into the temporary manifest when a specifier has none.
ANY_VERSION = "*"


def split_version(spec: str) -> tuple[str, str | None]:
    """Split a specifier into ``(name, range)``.

    The separator is the last ``@`` that is not the first character, so
    a scope marker survives: ``"@bar/foo@^1.0.0"`` -> ``("@bar/foo", "^1.0.0")``.
    A bare name yields ``(name, None)``.
    """
    if not spec:
        raise ParseError("Empty dependency specifier")
    idx = spec.rfind("@")
    if idx <= 0:
        return spec, None
    return spec[:idx], spec[idx + 1 :]


def build_manifest(dependencies: Iterable[str]) -> dict[str, dict[str, str]]:
    """Synthetic package.json content requesting exactly *dependencies*."""
    deps: dict[str, str] = {}
    for spec in dependencies:
        name, version = split_version(spec)
        deps[name] = version or ANY_VERSION
    return {"dependencies": deps}
