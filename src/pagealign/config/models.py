"""Pydantic configuration models with env var support."""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from pagealign.config.defaults import (
    DEFAULT_ABI,
    DEFAULT_MIN_ALIGN,
    DEFAULT_NOTE_PATTERN,
    DEFAULT_TOOL_TIMEOUT,
)


class ObjdumpConfig(BaseModel):
    path: str | None = None
    ndk_home: str | None = None
    timeout: float | None = DEFAULT_TOOL_TIMEOUT


class NoteConfig(BaseModel):
    pattern: str = DEFAULT_NOTE_PATTERN
    strict: bool = False

    @field_validator("pattern")
    @classmethod
    def _compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"invalid note pattern: {exc}") from exc
        return value


class PageAlignConfig(BaseModel):
    min_align: int = Field(default=DEFAULT_MIN_ALIGN, ge=0)
    abi: str = DEFAULT_ABI
    backend: Literal["direct", "objdump"] = "direct"
    objdump: ObjdumpConfig = Field(default_factory=ObjdumpConfig)
    note: NoteConfig = Field(default_factory=NoteConfig)
