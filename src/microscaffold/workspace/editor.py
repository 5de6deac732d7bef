"""In-place literal text rewriting and .ts/.js config lookup.

apply_replacements() swaps every key in one simultaneous pass, so a value
inserted for one key is never re-matched by another key.
"""

import logging
import re
from collections.abc import Mapping, Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_EXTENSIONS = (".ts", ".js")


def replace_literals(text: str, replacements: Mapping[str, str]) -> str:
    """Return text with all occurrences of each key replaced by its value."""
    keys = [k for k in replacements if k]
    if not keys:
        return text
    # Longest first so a key that prefixes another never shadows it
    keys.sort(key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(k) for k in keys))
    return pattern.sub(lambda m: replacements[m.group(0)], text)


def apply_replacements(path: Path, replacements: Mapping[str, str]) -> bool:
    """Rewrite a file with the given literal replacements.

    A missing file is not an error. The file is only written when its text
    actually changes; newlines and encoding are preserved as-is.

    Returns:
        True if the file was rewritten.

    Raises:
        UnicodeDecodeError: If the file is not UTF-8 text. Nothing is written.
    """
    if not path.is_file():
        logger.debug("Skip rewrite, file not found: %s", path)
        return False

    original = path.read_bytes().decode("utf-8")
    updated = replace_literals(original, replacements)
    if updated == original:
        logger.debug("No placeholders matched in %s", path)
        return False

    path.write_bytes(updated.encode("utf-8"))
    logger.debug("Rewrote %s", path)
    return True


def locate_config(
    directory: Path, basename: str, extensions: Sequence[str] = CONFIG_EXTENSIONS
) -> Path | None:
    """Return the first existing ``directory/basename<ext>``, or None."""
    for ext in extensions:
        candidate = directory / f"{basename}{ext}"
        if candidate.is_file():
            return candidate
    return None
