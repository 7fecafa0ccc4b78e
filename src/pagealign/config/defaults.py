"""Default configuration values and paths."""

from __future__ import annotations

from pathlib import Path

CONFIG_FILE_NAMES = [
    "pagealign.yaml",
    "pagealign.yml",
    ".pagealign.yaml",
    ".pagealign.yml",
]

CONFIG_SEARCH_PATHS = [
    Path.cwd(),
    Path.home() / ".config" / "pagealign",
    Path.home(),
]

DEFAULT_MIN_ALIGN = 16384
DEFAULT_ABI = "arm64-v8a"
DEFAULT_NOTE_PATTERN = r"(?i)android"
DEFAULT_TOOL_TIMEOUT = 60.0

ARCHIVE_SUFFIXES = (".apk", ".aab", ".aar", ".zip")

# Searched in order when no explicit objdump path is configured.
NDK_ENV_VARS = ["ANDROID_NDK_HOME", "ANDROID_NDK_ROOT", "ANDROID_NDK"]
SDK_ENV_VARS = ["ANDROID_HOME", "ANDROID_SDK_ROOT"]
OBJDUMP_NAMES = ["llvm-objdump", "objdump"]
