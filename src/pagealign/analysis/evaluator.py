"""Per-binary verdict: every LOAD segment checked, compatibility note carried."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pagealign.analysis.segment_validator import validate_segment
from pagealign.config.defaults import DEFAULT_MIN_ALIGN
from pagealign.errors import ParseError
from pagealign.extraction.reader import HeaderReader
from pagealign.extraction.segment import Segment
from pagealign.utils.logging import get_logger

log = get_logger(__name__)

NO_LOAD_SEGMENTS = "no load segments found"


@dataclass(frozen=True)
class BinaryResult:
    path: str
    segments: tuple[Segment, ...] = ()
    details: tuple[str, ...] = ()
    has_compat_note: bool = False
    issues: tuple[str, ...] = ()

    @property
    def passed(self) -> bool:
        return bool(self.segments) and not self.issues


def format_segment(index: int, segment: Segment, issues: list[str]) -> str:
    status = "OK" if not issues else "FAIL: " + "; ".join(issues)
    return (
        f"Segment {index} - Align:{segment.alignment} "
        f"VAddr:0x{segment.virtual_address:x} Offset:0x{segment.file_offset:x} [{status}]"
    )


def evaluate_binary(
    path: Path,
    reader: HeaderReader,
    min_align: int = DEFAULT_MIN_ALIGN,
    label: str | None = None,
) -> BinaryResult:
    """Read *path* with *reader* and validate each of its LOAD segments."""
    label = label or str(path)

    try:
        dump = reader(Path(path))
    except ParseError as exc:
        log.warning("binary_unreadable", path=label, returncode=exc.returncode)
        return BinaryResult(path=label, issues=(exc.describe(),))

    if not dump.segments:
        log.warning("no_load_segments", path=label)
        return BinaryResult(
            path=label,
            has_compat_note=dump.has_compat_note,
            issues=(NO_LOAD_SEGMENTS,),
        )

    details: list[str] = []
    issues: list[str] = []
    for index, segment in enumerate(dump.segments, start=1):
        seg_issues = validate_segment(segment, min_align)
        details.append(format_segment(index, segment, seg_issues))
        issues.extend(f"Segment {index}: {issue}" for issue in seg_issues)

    result = BinaryResult(
        path=label,
        segments=dump.segments,
        details=tuple(details),
        has_compat_note=dump.has_compat_note,
        issues=tuple(issues),
    )
    log.info(
        "binary_evaluated",
        path=label,
        segments=len(result.segments),
        passed=result.passed,
        compat_note=result.has_compat_note,
    )
    return result
