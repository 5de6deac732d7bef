"""Template cloning — copies a template tree minus build output and caches.

Excluded directories are neither descended into nor created in the
destination; excluded files are matched by fnmatch-style name patterns.
"""

import fnmatch
import logging
import os
import shutil
from collections.abc import Collection, Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def _make_ignore(excluded_dirs: Collection[str], excluded_files: Iterable[str]):
    """Build a shutil.copytree ignore callback for the given exclusions."""
    patterns = tuple(excluded_files)

    def _ignore(directory: str, names: list[str]) -> set[str]:
        ignored: set[str] = set()
        for name in names:
            if os.path.isdir(os.path.join(directory, name)):
                if name in excluded_dirs:
                    ignored.add(name)
            elif any(fnmatch.fnmatchcase(name, p) for p in patterns):
                ignored.add(name)
        return ignored

    return _ignore


def clone_tree(
    source: Path,
    destination: Path,
    excluded_dirs: Collection[str] = (),
    excluded_files: Iterable[str] = (),
) -> list[Path]:
    """Recursively copy source into destination, skipping exclusions.

    Args:
        source: Template directory to copy from.
        destination: Directory to create (parents included).
        excluded_dirs: Directory names skipped at any depth.
        excluded_files: Glob patterns matched against file names.

    Returns:
        Relative paths of the copied files, sorted.

    Raises:
        FileNotFoundError: If source does not exist.
        OSError: On any read/write failure. The destination may be left
            partially populated.
    """
    if not source.is_dir():
        raise FileNotFoundError(f"Source directory not found: {source}")

    destination.mkdir(parents=True, exist_ok=True)
    copied: list[Path] = []

    def _copy(src: str, dst: str) -> str:
        copied.append(Path(src).relative_to(source))
        return shutil.copy2(src, dst)

    shutil.copytree(
        source,
        destination,
        ignore=_make_ignore(excluded_dirs, excluded_files),
        copy_function=_copy,
        dirs_exist_ok=True,
    )
    logger.info("Cloned %d file(s) from %s to %s", len(copied), source, destination)
    return sorted(copied)
