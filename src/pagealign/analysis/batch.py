"""Batch evaluation, result folding and the plain-text compliance report."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from pagealign.analysis.evaluator import BinaryResult, evaluate_binary
from pagealign.config.defaults import DEFAULT_MIN_ALIGN
from pagealign.extraction.discovery import DiscoveredBinary
from pagealign.extraction.reader import HeaderReader
from pagealign.utils.logging import get_logger
from pagealign.utils.progress import progress_context

log = get_logger(__name__)

EXIT_OK = 0
EXIT_SETUP_ERROR = 1
EXIT_NON_COMPLIANT = 2

FAILURE_HINTS = (
    "Rebuild with Android NDK r28 or newer (16KB aligned by default).",
    "On older NDKs link with -Wl,-z,max-page-size=16384 and recompile.",
    "For prebuilt third-party libraries, ask the vendor for a 16KB compatible build.",
)
WARNING_HINT = "Update the toolchain that produced these libraries; the compatibility note is emitted by recent NDKs."


@dataclass(frozen=True)
class BatchSummary:
    results: tuple[BinaryResult, ...] = ()
    failures: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def exit_code(self) -> int:
        return EXIT_OK if self.ok else EXIT_NON_COMPLIANT


def summarize(results: Iterable[BinaryResult]) -> BatchSummary:
    """Fold per-binary results; failures and missing notes are tracked independently."""
    results = tuple(results)
    return BatchSummary(
        results=results,
        failures=tuple(r.path for r in results if not r.passed),
        warnings=tuple(r.path for r in results if not r.has_compat_note),
    )


def run_batch(
    binaries: Sequence[DiscoveredBinary],
    reader: HeaderReader,
    min_align: int = DEFAULT_MIN_ALIGN,
    show_progress: bool = False,
) -> BatchSummary:
    """Evaluate each binary in discovery order and summarize."""
    results: list[BinaryResult] = []
    if show_progress and binaries:
        with progress_context("Checking binaries", len(binaries)) as (progress, task_id):
            for binary in binaries:
                results.append(evaluate_binary(binary.path, reader, min_align, label=binary.label))
                progress.advance(task_id)
    else:
        for binary in binaries:
            results.append(evaluate_binary(binary.path, reader, min_align, label=binary.label))

    summary = summarize(results)
    log.info(
        "batch_complete",
        binaries=len(summary.results),
        failures=len(summary.failures),
        warnings=len(summary.warnings),
    )
    return summary


def render_result(result: BinaryResult) -> list[str]:
    lines = [f"File: {result.path}"]
    lines.extend(f"  {detail}" for detail in result.details)
    lines.append(f"  Compatibility note: {'Found' if result.has_compat_note else 'Not found'}")
    if result.passed:
        lines.append("  Result: PASS")
    else:
        lines.append("  Result: FAIL")
        lines.extend(f"    - {issue}" for issue in result.issues)
    return lines


def render_report(summary: BatchSummary, min_align: int = DEFAULT_MIN_ALIGN) -> str:
    """Render per-file blocks followed by the aggregate verdict."""
    lines = [f"16KB page size compliance report (minimum alignment {min_align})", ""]
    for result in summary.results:
        lines.extend(render_result(result))
        lines.append("")

    lines.append("=" * 60)
    lines.append(f"Binaries checked: {len(summary.results)}")
    lines.append(f"Overall: {'PASS' if summary.ok else 'FAIL'}")

    lines.append(f"Non-compliant files: {len(summary.failures)}")
    lines.extend(f"  - {path}" for path in summary.failures)
    if summary.failures:
        lines.extend(f"  * {hint}" for hint in FAILURE_HINTS)

    lines.append(f"Files missing compatibility note: {len(summary.warnings)}")
    lines.extend(f"  - {path}" for path in summary.warnings)
    if summary.warnings:
        lines.append(f"  * {WARNING_HINT}")

    return "\n".join(lines) + "\n"
