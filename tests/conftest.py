"""Shared test fixtures."""

from __future__ import annotations

import struct
from pathlib import Path
from typing import Callable

import pytest

from pagealign.config.models import NoteConfig, PageAlignConfig
from pagealign.extraction.segment import HeaderDump, Segment

PT_LOAD = 1
PT_NOTE = 4
PT_GNU_STACK = 0x6474E551
SHT_NOTE = 7
SHT_STRTAB = 3
EM_AARCH64 = 183


def _pad(data: bytes, align: int = 4) -> bytes:
    return data + b"\x00" * (-len(data) % align)


def build_elf64(
    segments: list[tuple[int, int, int]],
    android_note: bool = False,
    extra_phdrs: list[int] | None = None,
) -> bytes:
    """Build a minimal little-endian AArch64 ET_DYN image.

    ``segments`` are ``(align, vaddr, offset)`` PT_LOAD entries; ``extra_phdrs``
    adds empty program headers of the given types after them.
    """
    phdr_types = [PT_LOAD] * len(segments) + list(extra_phdrs or [])
    phoff = 64
    data_off = phoff + 56 * len(phdr_types)

    note = b""
    if android_note:
        name = b"Android\x00"
        desc = struct.pack("<IIII", 35, 0, 0, 0)
        note = struct.pack("<III", len(name), len(desc), 1) + _pad(name) + desc

    names = [b"", b".shstrtab"] + ([b".note.android.ident"] if android_note else [])
    shstrtab = b""
    name_offsets = []
    for n in names:
        name_offsets.append(len(shstrtab))
        shstrtab += n + b"\x00"

    note_off = data_off
    strtab_off = note_off + len(note)
    shoff = strtab_off + len(shstrtab)
    shoff += -shoff % 8

    sections = [struct.pack("<IIQQQQIIQQ", 0, 0, 0, 0, 0, 0, 0, 0, 0, 0)]
    sections.append(
        struct.pack("<IIQQQQIIQQ", name_offsets[1], SHT_STRTAB, 0, 0, strtab_off, len(shstrtab), 0, 0, 1, 0)
    )
    if android_note:
        sections.append(
            struct.pack("<IIQQQQIIQQ", name_offsets[2], SHT_NOTE, 2, note_off, note_off, len(note), 0, 0, 4, 0)
        )

    ident = b"\x7fELF" + bytes([2, 1, 1, 0]) + b"\x00" * 8
    header = ident + struct.pack(
        "<HHIQQQIHHHHHH",
        3,  # ET_DYN
        EM_AARCH64,
        1,
        0,
        phoff,
        shoff,
        0,
        64,
        56,
        len(phdr_types),
        64,
        len(sections),
        1,  # .shstrtab
    )

    phdrs = b""
    for align, vaddr, offset in segments:
        phdrs += struct.pack("<IIQQQQQQ", PT_LOAD, 5, offset, vaddr, vaddr, 0, 0, align)
    for p_type in extra_phdrs or []:
        phdrs += struct.pack("<IIQQQQQQ", p_type, 6, 0, 0, 0, 0, 0, 16)

    body = header + phdrs + note + shstrtab
    body += b"\x00" * (shoff - len(body))
    return body + b"".join(sections)


@pytest.fixture
def make_elf(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a synthetic ELF under ``<tmp>/.../arm64-v8a/<name>``."""

    def _make(
        name: str = "libsample.so",
        segments: list[tuple[int, int, int]] | None = None,
        android_note: bool = False,
        abi: str = "arm64-v8a",
        root: Path | None = None,
        extra_phdrs: list[int] | None = None,
    ) -> Path:
        if segments is None:
            segments = [(16384, 0x0, 0x0), (16384, 0x10000, 0x10000)]
        target_dir = (root or tmp_path) / "lib" / abi
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / name
        path.write_bytes(build_elf64(segments, android_note=android_note, extra_phdrs=extra_phdrs))
        return path

    return _make


@pytest.fixture
def sample_config() -> PageAlignConfig:
    return PageAlignConfig(
        min_align=16384,
        abi="arm64-v8a",
        backend="direct",
        note=NoteConfig(pattern=r"(?i)android", strict=False),
    )


@pytest.fixture
def compliant_dump() -> HeaderDump:
    return HeaderDump(
        path="lib/arm64-v8a/libok.so",
        segments=(
            Segment(alignment=16384, virtual_address=0x0, file_offset=0x0),
            Segment(alignment=16384, virtual_address=0x100000, file_offset=0x10000),
        ),
        has_compat_note=True,
        machine="AArch64",
    )


@pytest.fixture
def misaligned_dump() -> HeaderDump:
    return HeaderDump(
        path="lib/arm64-v8a/libbad.so",
        segments=(
            Segment(alignment=16384, virtual_address=0x0, file_offset=0x0),
            Segment(alignment=16384, virtual_address=0x4F4BC0, file_offset=0x4ECBC0),
        ),
        has_compat_note=False,
        machine="AArch64",
    )


def static_reader(dump: HeaderDump) -> Callable[[Path], HeaderDump]:
    def _read(path: Path) -> HeaderDump:
        return dump

    return _read


@pytest.fixture
def reader_for() -> Callable[[HeaderDump], Callable[[Path], HeaderDump]]:
    """Wrap a HeaderDump into a reader callable that ignores its path."""
    return static_reader
