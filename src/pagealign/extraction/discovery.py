"""Find target-ABI shared objects in a file, a directory tree or an archive."""

from __future__ import annotations

import tempfile
import zipfile
import zlib
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Generator

from pagealign.config.defaults import ARCHIVE_SUFFIXES, DEFAULT_ABI
from pagealign.errors import SetupError
from pagealign.utils.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class DiscoveredBinary:
    path: Path
    label: str  # what reports show; archive members read "app.apk!lib/arm64-v8a/libx.so"


def is_archive(path: Path) -> bool:
    return path.suffix.lower() in ARCHIVE_SUFFIXES


def scan_directory(root: Path, abi: str = DEFAULT_ABI) -> list[DiscoveredBinary]:
    """Recursively collect ``*.so`` files that sit under an ``<abi>`` directory."""
    found = []
    for p in sorted(root.rglob("*.so")):
        if p.is_file() and abi in (root.name, *p.relative_to(root).parts[:-1]):
            found.append(DiscoveredBinary(path=p, label=str(p)))
    return found


def archive_members(archive: zipfile.ZipFile, abi: str = DEFAULT_ABI) -> list[str]:
    members = []
    for name in archive.namelist():
        parts = PurePosixPath(name).parts
        if name.endswith(".so") and abi in parts[:-1]:
            members.append(name)
    return sorted(members)


def extract_archive(archive_path: Path, dest: Path, abi: str = DEFAULT_ABI) -> list[DiscoveredBinary]:
    """Extract matching members into *dest*, one numbered directory per member."""
    try:
        with zipfile.ZipFile(archive_path) as archive:
            found = []
            for i, member in enumerate(archive_members(archive, abi)):
                target = dest / f"{i:04d}" / PurePosixPath(member).name
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_bytes(archive.read(member))
                found.append(DiscoveredBinary(path=target, label=f"{archive_path.name}!{member}"))
    except (zipfile.BadZipFile, zlib.error, OSError, RuntimeError) as exc:
        raise SetupError(f"Not a readable archive: {archive_path} ({exc})") from exc

    log.info("archive_extracted", archive=str(archive_path), binaries=len(found))
    return found


@contextmanager
def discover_binaries(path: Path, abi: str = DEFAULT_ABI) -> Generator[list[DiscoveredBinary], None, None]:
    """Yield the binaries to check; temporary extraction is removed on exit."""
    path = Path(path)
    if not path.exists():
        raise SetupError(f"Path not found: {path}")

    if path.is_dir():
        found = scan_directory(path, abi)
        log.info("directory_scanned", path=str(path), binaries=len(found))
        yield found
        return

    if is_archive(path):
        with tempfile.TemporaryDirectory(prefix="pagealign-") as tmp:
            yield extract_archive(path, Path(tmp), abi)
        return

    if path.parent.name != abi:
        raise SetupError(f"{path} is not inside an '{abi}' directory")
    yield [DiscoveredBinary(path=path, label=str(path))]
