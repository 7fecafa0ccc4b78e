"""Direct program-header reader using pyelftools — no external tool required."""

from __future__ import annotations

from pathlib import Path

from elftools.common.exceptions import ELFError
from elftools.elf.elffile import ELFFile
from elftools.elf.sections import NoteSection
from elftools.elf.segments import NoteSegment

from pagealign.errors import ParseError
from pagealign.extraction.notes import NoteMatcher, note_signature
from pagealign.extraction.segment import HeaderDump, Segment
from pagealign.utils.logging import get_logger

log = get_logger(__name__)


def read_elf_headers(path: Path, matcher: NoteMatcher | None = None) -> HeaderDump:
    """Read PT_LOAD segments and note signatures straight from the file's bytes."""
    path = Path(path)
    matcher = matcher or NoteMatcher()

    try:
        with open(path, "rb") as f:
            elf = ELFFile(f)
            machine = _get_arch(elf)
            segments = _get_load_segments(elf)
            signatures = _read_signatures(elf, path)
    except Exception as exc:
        log.error("elf_read_failed", path=str(path), error=str(exc))
        raise ParseError(path, str(exc) or type(exc).__name__) from exc

    has_note = matcher.matches(signatures)
    log.debug(
        "elf_headers_read",
        path=str(path),
        machine=machine,
        load_segments=len(segments),
        compat_note=has_note,
    )

    return HeaderDump(
        path=str(path),
        segments=tuple(segments),
        has_compat_note=has_note,
        machine=machine,
        backend="direct",
    )


def _get_arch(elf: ELFFile) -> str:
    machine = elf.header.e_machine
    mapping = {
        "EM_AARCH64": "AArch64",
        "EM_ARM": "ARM",
        "EM_X86_64": "x86_64",
        "EM_386": "x86",
        "EM_RISCV": "RISCV",
    }
    return mapping.get(machine, str(machine))


def _get_load_segments(elf: ELFFile) -> list[Segment]:
    segments: list[Segment] = []
    for seg in elf.iter_segments():
        if seg["p_type"] != "PT_LOAD":
            continue
        segments.append(
            Segment(
                alignment=seg["p_align"],
                virtual_address=seg["p_vaddr"],
                file_offset=seg["p_offset"],
            )
        )
    return segments


def _read_signatures(elf: ELFFile, path: Path) -> list[str]:
    # A broken section or note table only loses the note flag, never the segment check.
    try:
        return _get_signatures(elf, path)
    except Exception as exc:
        log.warning("elf_sections_unreadable", path=str(path), error=str(exc))
        return []


def _get_signatures(elf: ELFFile, path: Path) -> list[str]:
    """Collect section names, segment types and note owners for note matching."""
    signatures: list[str] = []

    for seg in elf.iter_segments():
        signatures.append(str(seg["p_type"]))
        if isinstance(seg, NoteSegment):
            signatures.extend(_iter_note_signatures(seg, path))

    for section in elf.iter_sections():
        if section.name:
            signatures.append(section.name)
        if isinstance(section, NoteSection):
            signatures.extend(_iter_note_signatures(section, path))

    return signatures


def _iter_note_signatures(container: NoteSection | NoteSegment, path: Path) -> list[str]:
    try:
        return [note_signature(note["n_name"], note["n_type"]) for note in container.iter_notes()]
    except ELFError as exc:
        log.warning("elf_notes_unreadable", path=str(path), error=str(exc))
        return []
