"""pagealign tools — show where the objdump backend looks for llvm-objdump."""

from __future__ import annotations

import typer


def tools_cmd() -> None:
    """List objdump search locations and the one that would be used."""
    from pagealign.cli.app import get_context
    from pagealign.errors import SetupError
    from pagealign.extraction.toolchain import candidate_paths, find_objdump
    from pagealign.utils.formatters import print_error, print_success, print_table

    cfg = get_context().ensure_config()

    rows = [
        {"candidate": str(p), "exists": "yes" if p.is_file() else "no"}
        for p in candidate_paths(cfg.objdump.ndk_home)
    ]
    print_table(rows, title="NDK llvm-objdump locations")

    try:
        found = find_objdump(cfg.objdump.path, cfg.objdump.ndk_home)
    except SetupError as exc:
        print_error(str(exc))
        raise typer.Exit(1)
    print_success(f"Using {found}")
