"""Exception hierarchy for setup and per-binary parse failures."""

from __future__ import annotations

from pathlib import Path


class PageAlignError(Exception):
    """Base class for all pagealign errors."""


class SetupError(PageAlignError):
    """A precondition failed before any binary was evaluated.

    Raised for a missing or invalid input path, a single binary outside the
    ABI directory convention, an unreadable archive, or a missing inspection
    tool. The CLI reports it once and exits with status 1.
    """


class ParseError(PageAlignError):
    """Program headers could not be read from one binary.

    ``returncode`` is the inspection tool's exit status when an external tool
    was used and exited non-zero, otherwise ``None``.
    """

    def __init__(self, path: str | Path, reason: str, returncode: int | None = None) -> None:
        self.path = str(path)
        self.reason = reason
        self.returncode = returncode
        super().__init__(self.describe())

    def describe(self) -> str:
        if self.returncode is not None:
            return f"header dump failed with exit code {self.returncode} for {self.path}: {self.reason}"
        return f"failed to read program headers from {self.path}: {self.reason}"
