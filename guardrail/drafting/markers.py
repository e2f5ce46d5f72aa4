"""Citation markers: ``[SUPPORT:<id>]`` tokens embedded in draft prose.

Before prose is rewritten, each marker is swapped for a positional
placeholder (``<<C0>>``, ``<<C1>>``, ...) and swapped back afterwards, so
the marker text itself never passes through a rewrite. Text that already
looks like a placeholder is protected the same way, so restore gives it
back unchanged.
"""

import re
from collections import Counter

from pydantic import BaseModel

MARKER_RE = re.compile(r"\[SUPPORT:([a-f0-9-]+)\]", re.IGNORECASE)
PLACEHOLDER_RE = re.compile(r"<<C(\d+)>>")
_PROTECTED_RE = re.compile(f"{MARKER_RE.pattern}|{PLACEHOLDER_RE.pattern}", re.IGNORECASE)


class ProtectedText(BaseModel):
    """Placeholder-substituted text plus the original protected tokens by index."""

    text: str
    markers: list[str]

    def placeholders_intact(self, rewritten: str) -> bool:
        """True if ``rewritten`` holds each placeholder exactly once, in any order."""
        found = Counter(int(i) for i in PLACEHOLDER_RE.findall(rewritten))
        return found == Counter(range(len(self.markers)))


def protect(text: str) -> ProtectedText:
    markers: list[str] = []

    def _swap(match: re.Match) -> str:
        markers.append(match.group(0))
        return f"<<C{len(markers) - 1}>>"

    return ProtectedText(text=_PROTECTED_RE.sub(_swap, text), markers=markers)


def restore(text: str, markers: list[str]) -> str:
    """Put original markers back; unknown placeholders resolve to ""."""

    def _swap(match: re.Match) -> str:
        i = int(match.group(1))
        return markers[i] if i < len(markers) else ""

    return PLACEHOLDER_RE.sub(_swap, text)


def support_ids(text: str) -> list[str]:
    """Support ids cited in ``text``, deduplicated in order of first appearance."""
    return list(dict.fromkeys(m.group(1) for m in MARKER_RE.finditer(text)))
