"""pagealign — Android 16KB page-size compliance checker for native libraries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from pagealign.version import __version__

if TYPE_CHECKING:
    from pagealign.config.models import PageAlignConfig
    from pagealign.extraction.reader import HeaderReader


@dataclass
class PageAlignContext:
    """Dependency-injection container shared across CLI commands."""

    config: PageAlignConfig | None = None
    reader: HeaderReader | None = None

    def configure(self, config: PageAlignConfig) -> None:
        self.config = config
        self.reader = None

    def ensure_config(self) -> PageAlignConfig:
        if self.config is None:
            from pagealign.config.loader import load_config

            self.config = load_config()
        return self.config

    def ensure_reader(self) -> HeaderReader:
        if self.reader is None:
            from pagealign.extraction.reader import create_reader

            self.reader = create_reader(self.ensure_config())
        return self.reader


__all__ = ["PageAlignContext", "__version__"]
