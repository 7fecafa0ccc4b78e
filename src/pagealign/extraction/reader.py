"""Build the header reader selected by configuration."""

from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import Callable

from pagealign.config.models import PageAlignConfig
from pagealign.extraction.notes import NoteMatcher
from pagealign.extraction.segment import HeaderDump

HeaderReader = Callable[[Path], HeaderDump]


def create_reader(config: PageAlignConfig) -> HeaderReader:
    """Return a ``path -> HeaderDump`` callable; raises SetupError if objdump is missing."""
    matcher = NoteMatcher(config.note.pattern, strict=config.note.strict)

    if config.backend == "objdump":
        from pagealign.extraction.objdump_runner import read_objdump_headers
        from pagealign.extraction.toolchain import find_objdump

        objdump = find_objdump(config.objdump.path, config.objdump.ndk_home)
        return partial(
            read_objdump_headers,
            objdump=objdump,
            matcher=matcher,
            timeout=config.objdump.timeout,
        )

    from pagealign.extraction.elf_reader import read_elf_headers

    return partial(read_elf_headers, matcher=matcher)
