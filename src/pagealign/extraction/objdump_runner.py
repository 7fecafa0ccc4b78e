"""Program-header reader backed by an external ``llvm-objdump`` process.

The tool's private-header dump (``-p``) lists one block per program header::

        LOAD off    0x0000000000000000 vaddr 0x0000000000000000 paddr ... align 2**14
             filesz 0x00000000000008d4 memsz 0x00000000000008d4 flags r--

and the section table (``-h``) lists section names. Only the type marker and
the ``off``/``vaddr``/``align`` fields are scraped.
"""

from __future__ import annotations

import re
import subprocess
from pathlib import Path

from pagealign.errors import ParseError
from pagealign.extraction.notes import NoteMatcher
from pagealign.extraction.segment import HeaderDump, Segment
from pagealign.utils.logging import get_logger

log = get_logger(__name__)

_TYPE_MARKER = re.compile(r"^\s*(\S+)\s+off\s+")
_OFFSET_FIELD = re.compile(r"\boff\s+(\S+)")
_VADDR_FIELD = re.compile(r"\bvaddr\s+(\S+)")
_ALIGN_FIELD = re.compile(r"\balign\s+(\S+)")
_SECTION_ROW = re.compile(r"^\s*\d+\s+(\.\S+)\s+[0-9a-fA-F]+\b")


def parse_int(text: str) -> int:
    """Normalize ``0x1f``, ``31`` or objdump's ``2**5`` to an unsigned int."""
    text = text.strip().rstrip(",")
    if "**" in text:
        base, _, exp = text.partition("**")
        return int(base) ** int(exp)
    if text.lower().startswith("0x"):
        return int(text, 16)
    return int(text, 10)


def parse_objdump_output(output: str) -> tuple[list[Segment], list[str]]:
    """Scrape LOAD segments and note-matching signatures from objdump text."""
    segments: list[Segment] = []
    signatures: list[str] = []
    block: dict[str, int] | None = None

    def _close() -> None:
        if block is not None:
            segments.append(
                Segment(
                    alignment=block.get("align", 0),
                    virtual_address=block.get("vaddr", 0),
                    file_offset=block.get("off", 0),
                )
            )

    for line in output.splitlines():
        signatures.append(line)

        section = _SECTION_ROW.match(line)
        if section:
            signatures.append(section.group(1))

        marker = _TYPE_MARKER.match(line)
        if marker:
            _close()
            block = {} if marker.group(1) == "LOAD" else None

        if block is None:
            continue
        for key, pattern in (("off", _OFFSET_FIELD), ("vaddr", _VADDR_FIELD), ("align", _ALIGN_FIELD)):
            match = pattern.search(line)
            if match and key not in block:
                block[key] = parse_int(match.group(1))

    _close()
    return segments, signatures


def read_objdump_headers(
    path: Path,
    objdump: str | Path,
    matcher: NoteMatcher | None = None,
    timeout: float | None = None,
) -> HeaderDump:
    """Run ``objdump -p -h`` on *path* and scrape its program headers."""
    path = Path(path)
    matcher = matcher or NoteMatcher()
    cmd = [str(objdump), "-p", "-h", str(path)]

    log.debug("running_objdump", cmd=" ".join(cmd))

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        log.error("objdump_timeout", path=str(path), timeout=timeout)
        raise ParseError(path, f"objdump timed out after {timeout}s") from exc
    except OSError as exc:
        log.error("objdump_unavailable", objdump=str(objdump), error=str(exc))
        raise ParseError(path, f"could not run {objdump}: {exc}") from exc

    if result.returncode != 0:
        log.error("objdump_failed", path=str(path), returncode=result.returncode, stderr=result.stderr[:500])
        raise ParseError(path, result.stderr.strip()[:200] or "no output", returncode=result.returncode)

    # The dump echoes the file name, which must not feed the note heuristic.
    output = result.stdout.replace(str(path), "")
    segments, signatures = parse_objdump_output(output)

    return HeaderDump(
        path=str(path),
        segments=tuple(segments),
        has_compat_note=matcher.matches(signatures),
        machine=_get_format(result.stdout),
        backend="objdump",
    )


def _get_format(output: str) -> str:
    match = re.search(r"file format\s+(\S+)", output)
    return match.group(1) if match else ""
