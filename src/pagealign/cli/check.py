"""pagealign check — validate PT_LOAD alignment of arm64 shared objects."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import typer
from pydantic import ValidationError

from pagealign.config.models import PageAlignConfig
from pagealign.errors import SetupError


def apply_overrides(config: PageAlignConfig, **overrides: Any) -> PageAlignConfig:
    """Merge CLI options over the loaded config; ``None`` keeps the file value."""
    data = config.model_dump()
    for key, value in overrides.items():
        if value is None:
            continue
        if "." in key:
            section, field = key.split(".", 1)
            data[section][field] = value
        else:
            data[key] = value
    try:
        return PageAlignConfig.model_validate(data)
    except ValidationError as exc:
        raise SetupError(f"Invalid settings: {exc}") from exc


def check_cmd(
    input_path: Path = typer.Argument(..., help="Shared object, directory, or .apk/.aab/.aar/.zip archive"),
    min_align: Optional[int] = typer.Option(None, "--min-align", help="Minimum PT_LOAD alignment in bytes"),
    backend: Optional[str] = typer.Option(None, "--backend", "-b", help="Header reader: direct|objdump"),
    objdump: Optional[str] = typer.Option(None, "--objdump", help="Path to llvm-objdump (objdump backend)"),
    abi: Optional[str] = typer.Option(None, "--abi", help="ABI directory to check, e.g. arm64-v8a"),
    strict_note: Optional[bool] = typer.Option(
        None, "--strict-note/--heuristic-note", help="Require an exact Android note instead of a text match"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write report to file"),
    progress: bool = typer.Option(True, "--progress/--no-progress", help="Show a progress bar"),
) -> None:
    """Check that every LOAD segment is aligned for 16KB pages."""
    from pagealign.analysis.batch import EXIT_OK, EXIT_SETUP_ERROR, render_report, run_batch
    from pagealign.cli.app import get_context
    from pagealign.extraction.discovery import discover_binaries
    from pagealign.utils.formatters import print_error, print_plain, print_success, print_warning

    ctx = get_context()

    try:
        cfg = apply_overrides(
            ctx.ensure_config(),
            min_align=min_align,
            backend=backend,
            abi=abi,
            **{"objdump.path": objdump, "note.strict": strict_note},
        )
        ctx.configure(cfg)
        reader = ctx.ensure_reader()

        with discover_binaries(input_path, cfg.abi) as binaries:
            if not binaries:
                print_warning(f"No {cfg.abi} shared objects found in {input_path}; nothing to check.")
                raise typer.Exit(EXIT_OK)
            summary = run_batch(binaries, reader, cfg.min_align, show_progress=progress)
    except SetupError as exc:
        print_error(str(exc))
        raise typer.Exit(EXIT_SETUP_ERROR)

    report = render_report(summary, cfg.min_align)
    print_plain(report)

    if output:
        try:
            output.write_text(report)
        except OSError as exc:
            print_error(f"Cannot write report to {output}: {exc}")
            raise typer.Exit(EXIT_SETUP_ERROR)
        print_success(f"Report written to {output}")

    if summary.ok:
        print_success(f"All {len(summary.results)} binaries are 16KB page size compliant")
    else:
        print_error(f"{len(summary.failures)} of {len(summary.results)} binaries are not 16KB page size compliant")
    if summary.warnings:
        print_warning(f"{len(summary.warnings)} binaries lack the compatibility note")

    raise typer.Exit(summary.exit_code)
