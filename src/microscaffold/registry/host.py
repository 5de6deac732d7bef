"""Host route-table registration — appends an app entry to the microSet array.

The host application lists its micro apps in a JS/TS source file, e.g.::

    export const microSet = [
      { name: "test", port: "6015" }, // 测试微应用
    ]

    export default ...

This module works on the text, not a syntax tree: it locates the collection
declaration, finds the matching closing bracket and inserts one line before
it, reusing the indentation of the entry above. Two shapes are recognised,
``]`` followed by another ``export`` and ``]`` terminated by ``;``. Any other
layout is left untouched and reported as unrecognised.

Key function: register_app().
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from ..app_spec import AppSpec
from ..outcome import APPLIED, SKIPPED_MISSING, SKIPPED_UNRECOGNIZED, UNCHANGED, StepStatus

logger = logging.getLogger(__name__)

_QUOTES = "\"'`"


def _skip_literal(text: str, i: int) -> int:
    """Return the index just past the string or comment starting at i, or i."""
    ch = text[i]
    if ch in _QUOTES:
        j = i + 1
        while j < len(text):
            if text[j] == "\\":
                j += 2
                continue
            if text[j] == ch:
                return j + 1
            j += 1
        return len(text)
    if text.startswith("//", i):
        nl = text.find("\n", i)
        return len(text) if nl == -1 else nl
    if text.startswith("/*", i):
        end = text.find("*/", i + 2)
        return len(text) if end == -1 else end + 2
    return i


def find_collection(text: str, collection: str) -> tuple[int, int] | None:
    """Locate the brackets of ``<collection> = [ ... ]``.

    Returns:
        (open_index, close_index) of the ``[`` and its matching ``]``,
        or None if the declaration or its closing bracket is not found.
    """
    m = re.search(rf"\b{re.escape(collection)}\b[^=\n;]*=\s*\[", text)
    if not m:
        return None

    start = m.end() - 1
    depth = 0
    i = start
    while i < len(text):
        skipped = _skip_literal(text, i)
        if skipped != i:
            i = skipped
            continue
        ch = text[i]
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return start, i
        i += 1
    return None


def _strip_comments(text: str) -> str:
    """Blank out // and /* */ comments, keeping strings and every whitespace char.

    The result has the same length and line breaks as ``text``.
    """
    parts: list[str] = []
    i = 0
    while i < len(text):
        skipped = _skip_literal(text, i)
        if skipped == i:
            parts.append(text[i])
            i += 1
        elif text[i] in _QUOTES:
            parts.append(text[i:skipped])
            i = skipped
        else:
            parts.append(re.sub(r"\S", " ", text[i:skipped]))
            i = skipped
    return "".join(parts)


def _indent_of(line: str) -> str:
    return line[: len(line) - len(line.lstrip(" \t"))]


def _with_trailing_comma(line: str, code: str) -> str:
    """Add a comma right after the last code character of ``line``.

    ``code`` is the same line with comments blanked out.
    """
    end = len(code.rstrip())
    if end == 0 or code[:end].endswith((",", "[")):
        return line
    return line[:end] + "," + line[end:]


def has_entry(text: str, collection: str, name: str) -> bool:
    """Whether the collection already contains an entry for ``name``.

    Commented-out entries do not count.
    """
    bounds = find_collection(text, collection)
    if bounds is None:
        return False
    body = _strip_comments(text[bounds[0] : bounds[1]])
    return re.search(rf"\bname\s*:\s*[{_QUOTES}]{re.escape(name)}[{_QUOTES}]", body) is not None


def insert_entry(text: str, collection: str, entry: str) -> str | None:
    """Return text with ``entry`` inserted as the last collection element.

    Returns None when the collection layout is not one of the recognised
    shapes.
    """
    bounds = find_collection(text, collection)
    if bounds is None:
        return None
    open_idx, close_idx = bounds

    after = text[close_idx + 1 :].lstrip()
    if not (after.startswith(";") or re.match(r"export\b", after)):
        return None

    newline = "\r\n" if "\r\n" in text else "\n"
    open_line_start = text.rfind("\n", 0, open_idx) + 1
    close_line_start = text.rfind("\n", 0, close_idx) + 1

    if close_line_start <= open_idx:
        # "[]" on one line: expand it
        if text[open_idx + 1 : close_idx].strip():
            return None
        indent = _indent_of(text[open_line_start:open_idx])
        return (
            text[: open_idx + 1]
            + newline
            + indent
            + "  "
            + entry
            + newline
            + indent
            + text[close_idx:]
        )

    if text[close_line_start:close_idx].strip():
        # "]" shares its line with an element
        return None

    region = text[open_line_start:close_line_start]
    lines = region.splitlines(keepends=True)
    code_lines = _strip_comments(region).splitlines(keepends=True)

    last = max(i for i, line in enumerate(lines) if line.strip())
    # lines[0] holds the "[" so there is always a code line
    code_last = max(i for i, line in enumerate(code_lines) if line.strip())
    # indent like the last entry, or one level in from the "[" line
    ref = code_last if code_last > 0 else last
    indent = _indent_of(lines[ref]) + ("  " if ref == 0 else "")
    lines[code_last] = _with_trailing_comma(lines[code_last], code_lines[code_last])
    lines.insert(last + 1, indent + entry + newline)

    return text[:open_line_start] + "".join(lines) + text[close_line_start:]


def register_app(config_path: Path, spec: AppSpec, collection: str = "microSet") -> StepStatus:
    """Register the app in the host application's route table.

    Best-effort: a missing file, a file that is not UTF-8 or an unrecognised
    layout is logged and reported, never raised. An existing entry with the
    same name is left as-is.
    """
    if not config_path.is_file():
        logger.warning("Host registration file not found: %s", config_path)
        return SKIPPED_MISSING

    try:
        text = config_path.read_bytes().decode("utf-8")
    except UnicodeDecodeError as e:
        logger.warning("Host registration file is not UTF-8 (%s): %s", e, config_path)
        return SKIPPED_UNRECOGNIZED
    if has_entry(text, collection, spec.name):
        logger.info("'%s' already registered in %s", spec.name, config_path)
        return UNCHANGED

    updated = insert_entry(text, collection, spec.registry_entry)
    if updated is None:
        logger.warning(
            "Could not find a recognisable '%s' array in %s; register '%s' manually",
            collection,
            config_path,
            spec.name,
        )
        return SKIPPED_UNRECOGNIZED

    config_path.write_bytes(updated.encode("utf-8"))
    logger.info("Registered '%s' in host app: %s", spec.name, config_path)
    return APPLIED
