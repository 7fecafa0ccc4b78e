"""PT_LOAD alignment rules for flexible (16KB) page sizes.

The dynamic loader maps a segment's file content starting at
``offset - offset % align`` to ``vaddr - vaddr % align``. A segment is only
safe on larger pages when its alignment reaches the page size and both
addresses agree modulo that alignment.
"""

from __future__ import annotations

from pagealign.config.defaults import DEFAULT_MIN_ALIGN
from pagealign.extraction.segment import Segment


def validate_segment(segment: Segment, min_align: int = DEFAULT_MIN_ALIGN) -> list[str]:
    """Return every violated rule, in fixed order. Empty means compliant."""
    issues: list[str] = []
    align = segment.alignment
    vaddr = segment.virtual_address
    offset = segment.file_offset

    if align < min_align:
        issues.append(f"alignment {align} is below the required {min_align}")

    # Zero alignment leaves nothing to divide by; only the floor applies.
    if align == 0:
        return issues

    vaddr_residue = vaddr % align
    offset_residue = offset % align

    if vaddr_residue != 0:
        issues.append(f"virtual address 0x{vaddr:x} is not a multiple of {align}")
    if offset_residue != 0:
        issues.append(f"file offset 0x{offset:x} is not a multiple of {align}")
    if vaddr_residue != offset_residue:
        issues.append(
            f"virtual address and file offset are not congruent modulo {align} "
            f"(0x{vaddr_residue:x} != 0x{offset_residue:x})"
        )
    return issues
