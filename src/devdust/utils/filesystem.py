"""Filesystem utilities for devdust."""

import fnmatch
import logging
import os
import shutil
import stat
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from devdust.models import ScanOptions

logger = logging.getLogger("devdust")

WalkItem = tuple[str, list[str], list[str]]


def walk(
    root: Path,
    options: "ScanOptions",
    on_error: Callable[[OSError], None] | None = None,
) -> Iterator[WalkItem]:
    """Walk a directory tree top-down, honouring the scan options.

    Yields ``(dirpath, dirnames, filenames)`` like ``os.walk``; callers may
    prune ``dirnames`` in place to stop descent. Directories on another
    device are skipped when ``options.same_filesystem`` is set, and followed
    symlinks are never entered twice.

    Args:
        root: Directory to walk
        options: Symlink and filesystem-boundary settings
        on_error: Called with every OSError met while listing directories
    """
    root_dev = None
    if options.same_filesystem:
        try:
            root_dev = os.stat(root).st_dev
        except OSError as e:
            if on_error:
                on_error(e)
            return

    visited: set[tuple[int, int]] = set()

    for dirpath, dirnames, filenames in os.walk(
        root, onerror=on_error, followlinks=options.follow_symlinks
    ):
        if options.follow_symlinks:
            try:
                st = os.stat(dirpath)
            except OSError as e:
                if on_error:
                    on_error(e)
                dirnames[:] = []
                continue
            key = (st.st_dev, st.st_ino)
            if key in visited:
                logger.debug("Already visited %s, not descending", dirpath)
                dirnames[:] = []
                continue
            visited.add(key)

        if root_dev is not None:
            dirnames[:] = [
                d for d in dirnames if _same_device(os.path.join(dirpath, d), root_dev, options)
            ]

        yield dirpath, dirnames, filenames


def _same_device(path: str, device: int, options: "ScanOptions") -> bool:
    try:
        st = os.stat(path) if options.follow_symlinks else os.lstat(path)
    except OSError:
        return False
    if st.st_dev != device:
        logger.debug("Skipping %s: different filesystem", path)
        return False
    return True


def get_directory_size(path: Path, options: "ScanOptions") -> int:
    """Get total size of regular files under a directory in bytes.

    Unreadable entries are skipped. Symlinked files only count when
    symlinks are followed.

    Args:
        path: Directory path
        options: Symlink and filesystem-boundary settings

    Returns:
        Size in bytes
    """
    total = 0
    for dirpath, _dirnames, filenames in walk(path, options):
        for name in filenames:
            file_path = os.path.join(dirpath, name)
            try:
                st = os.stat(file_path) if options.follow_symlinks else os.lstat(file_path)
            except OSError:
                continue
            if stat.S_ISREG(st.st_mode):
                total += st.st_size
    return total


def get_last_modified(path: Path, options: "ScanOptions") -> float:
    """Newest modification time of a directory and everything below it.

    Raises:
        OSError: If the directory itself cannot be stat'ed
    """
    newest = os.stat(path).st_mtime
    for dirpath, dirnames, filenames in walk(path, options):
        for name in dirnames + filenames:
            entry = os.path.join(dirpath, name)
            try:
                st = os.stat(entry) if options.follow_symlinks else os.lstat(entry)
            except OSError:
                continue
            if st.st_mtime > newest:
                newest = st.st_mtime
    return newest


def resolve_artifacts(root: Path, names: tuple[str, ...] | list[str]) -> list[Path]:
    """Find which artifact directories currently exist under a project root.

    Names are relative to ``root`` and may be nested ("project/target") or
    glob patterns ("*.egg-info"). Only real directories qualify: neither the
    artifact itself nor any component between it and the root may be a
    symlink. Directories reached twice (e.g. "Build" and "build" on a
    case-insensitive filesystem) are returned once.

    Args:
        root: Project root
        names: Artifact directory names for the project type

    Returns:
        Existing artifact directories, in table order
    """
    results = []
    seen: set[tuple[int, int]] = set()

    for name in names:
        if any(ch in name for ch in "*?["):
            try:
                candidates = sorted(
                    root / entry for entry in os.listdir(root) if fnmatch.fnmatch(entry, name)
                )
            except OSError:
                continue
        else:
            candidates = [root / name]

        for candidate in candidates:
            try:
                if _has_symlinked_parent(root, candidate):
                    logger.debug("Skipping %s: reached through a symlink", candidate)
                    continue
                st = os.lstat(candidate)
            except OSError:
                continue
            if not stat.S_ISDIR(st.st_mode):
                continue
            key = (st.st_dev, st.st_ino)
            if key in seen:
                continue
            seen.add(key)
            results.append(candidate)

    return results


def _has_symlinked_parent(root: Path, candidate: Path) -> bool:
    """Whether any component between root and candidate is a symlink."""
    current = root
    for part in candidate.relative_to(root).parts[:-1]:
        current = current / part
        if stat.S_ISLNK(os.lstat(current).st_mode):
            return True
    return False


def remove_directory(path: Path) -> None:
    """Recursively delete a directory.

    Raises:
        OSError: If anything under the directory could not be removed
    """
    logger.debug("Removing %s", path)
    shutil.rmtree(path)
