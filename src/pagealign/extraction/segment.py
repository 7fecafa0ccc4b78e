"""Frozen dataclasses representing program headers read from a binary."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Segment:
    alignment: int
    virtual_address: int
    file_offset: int


@dataclass(frozen=True)
class HeaderDump:
    path: str
    segments: tuple[Segment, ...] = ()  # PT_LOAD only, in program-header order
    has_compat_note: bool = False
    machine: str = ""
    backend: str = "direct"
