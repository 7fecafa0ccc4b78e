"""Compatibility-note detection over header/section signatures.

Readers describe each binary as a list of short text signatures (section
names, program-header type names and ``note <owner> <type>`` entries). The
matcher decides whether any of them marks a toolchain that supports flexible
page sizes.
"""

from __future__ import annotations

import re
from typing import Iterable

from pagealign.config.defaults import DEFAULT_NOTE_PATTERN

STRICT_PREFIXES = ("note Android ", ".note.android.")


def note_signature(owner: str, note_type: object) -> str:
    return f"note {owner} {note_type}"


class NoteMatcher:
    """Heuristic regex match by default, exact owner/section match when strict."""

    def __init__(self, pattern: str = DEFAULT_NOTE_PATTERN, strict: bool = False) -> None:
        self.pattern = re.compile(pattern)
        self.strict = strict

    def matches(self, signatures: Iterable[str]) -> bool:
        for sig in signatures:
            if self.strict:
                if sig.startswith(STRICT_PREFIXES):
                    return True
            elif self.pattern.search(sig):
                return True
        return False
