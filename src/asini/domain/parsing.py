"""Helpers for interpreting CLI stdout."""

from __future__ import annotations

import re


def split_lines(output: str) -> list[str]:
    """Split command output on newlines, dropping blank lines."""
    return [line.strip() for line in output.splitlines() if line.strip()]


def has_dist_tag(listing: str, tag: str) -> bool:
    """True if some line of ``npm dist-tag ls`` output starts with ``"<tag>: "``."""
    pattern = re.compile(rf"^{re.escape(tag)}: ", re.MULTILINE)
    return pattern.search(listing) is not None
