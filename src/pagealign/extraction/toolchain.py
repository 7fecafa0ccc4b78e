"""Locate an ``llvm-objdump`` binary: explicit path, Android NDK, then PATH."""

from __future__ import annotations

import os
import platform
import shutil
from pathlib import Path

from pagealign.config.defaults import NDK_ENV_VARS, OBJDUMP_NAMES, SDK_ENV_VARS
from pagealign.errors import SetupError
from pagealign.utils.logging import get_logger

log = get_logger(__name__)


def _host_tags() -> list[str]:
    system = platform.system()
    if system == "Darwin":
        return ["darwin-x86_64", "darwin-arm64"]
    if system == "Windows":
        return ["windows-x86_64"]
    return ["linux-x86_64", "linux-aarch64"]


def _exe(name: str) -> str:
    return f"{name}.exe" if platform.system() == "Windows" else name


def _ndk_roots(ndk_home: str | None = None) -> list[Path]:
    roots: list[Path] = []
    if ndk_home:
        roots.append(Path(ndk_home))
    for var in NDK_ENV_VARS:
        if os.environ.get(var):
            roots.append(Path(os.environ[var]))
    for var in SDK_ENV_VARS:
        if not os.environ.get(var):
            continue
        ndk_dir = Path(os.environ[var]) / "ndk"
        if ndk_dir.is_dir():
            # Side-by-side installs are named by version; newest first.
            versions = sorted((p for p in ndk_dir.iterdir() if p.is_dir()), key=_version_key, reverse=True)
            roots.extend(versions)
    return roots


def _version_key(path: Path) -> tuple[int, ...]:
    parts = []
    for piece in path.name.split("."):
        parts.append(int(piece) if piece.isdigit() else -1)
    return tuple(parts)


def candidate_paths(ndk_home: str | None = None) -> list[Path]:
    """Every NDK location checked for llvm-objdump, in search order."""
    candidates: list[Path] = []
    for root in _ndk_roots(ndk_home):
        for tag in _host_tags():
            candidates.append(root / "toolchains" / "llvm" / "prebuilt" / tag / "bin" / _exe("llvm-objdump"))
    return candidates


def find_objdump(explicit: str | None = None, ndk_home: str | None = None) -> Path:
    """Resolve the objdump executable or raise SetupError."""
    if explicit:
        p = Path(explicit)
        if p.is_file():
            return p
        found = shutil.which(explicit)
        if found:
            return Path(found)
        raise SetupError(f"objdump not found at {explicit}")

    for candidate in candidate_paths(ndk_home):
        if candidate.is_file():
            log.debug("objdump_found", path=str(candidate), source="ndk")
            return candidate

    for name in OBJDUMP_NAMES:
        found = shutil.which(name)
        if found:
            log.debug("objdump_found", path=found, source="path")
            return Path(found)

    raise SetupError(
        "llvm-objdump not found; set ANDROID_NDK_HOME, pass --objdump, "
        "or use the direct backend"
    )
