"""
Include/exclude pattern matching for ctxfile.

Patterns are shell globs. A pattern containing ``/`` is matched against the
file's path relative to the scan root; any other pattern is matched against
the file's base name only, so ``*.py`` selects Python files at every depth
while ``src/*.py`` only selects those directly under ``src``.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import List, Sequence, Tuple


class PatternError(ValueError):
    """Raised when a glob pattern is malformed."""


def split_patterns(value: str) -> List[str]:
    """Split a comma-separated option value into trimmed patterns."""
    if not value:
        return []
    return [part.strip() for part in value.split(",")]


# Glob translation
def _class_char(pattern: str, i: int) -> Tuple[str, int]:
    if i >= len(pattern) or pattern[i] in "-]":
        raise PatternError(f"bad character class in {pattern!r}")
    if pattern[i] == "\\":
        i += 1
        if i >= len(pattern):
            raise PatternError(f"trailing backslash in {pattern!r}")
    return pattern[i], i + 1


def _translate_class(pattern: str, i: int) -> Tuple[str, int]:
    """Translate the class starting just after ``[`` at *i*."""
    negate = i < len(pattern) and pattern[i] in "^!"
    if negate:
        i += 1

    ranges: List[Tuple[str, str]] = []
    nitems = 0
    while True:
        if i >= len(pattern):
            raise PatternError(f"unterminated character class in {pattern!r}")
        if pattern[i] == "]" and nitems:
            i += 1
            break
        lo, i = _class_char(pattern, i)
        hi = lo
        if i < len(pattern) and pattern[i] == "-":
            hi, i = _class_char(pattern, i + 1)
        nitems += 1
        # a reversed range is legal and matches nothing
        if lo <= hi:
            ranges.append((lo, hi))

    if not ranges:
        return ("." if negate else "(?!)"), i
    body = "".join(
        re.escape(lo) if lo == hi else f"{re.escape(lo)}-{re.escape(hi)}"
        for lo, hi in ranges
    )
    return f"[{'^' if negate else ''}{body}]", i


@lru_cache(maxsize=512)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """
    Compile a glob into a regular expression.

    ``*`` and ``?`` never cross a ``/``; ``**`` is just two stars. Raises
    :class:`PatternError` for unterminated or empty classes and a trailing
    backslash.
    """
    parts: List[str] = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        i += 1
        if c == "*":
            parts.append("[^/]*")
        elif c == "?":
            parts.append("[^/]")
        elif c == "[":
            cls, i = _translate_class(pattern, i)
            parts.append(cls)
        elif c == "\\":
            if i >= len(pattern):
                raise PatternError(f"trailing backslash in {pattern!r}")
            parts.append(re.escape(pattern[i]))
            i += 1
        else:
            parts.append(re.escape(c))
    return re.compile("".join(parts), re.DOTALL)


# Matching
def matches(pattern: str, full_path: str, file_name: str) -> bool:
    """Match *pattern* against the relative path or the base name."""
    target = full_path if "/" in pattern else file_name
    try:
        regex = compile_pattern(pattern)
    except PatternError:
        return False
    return regex.fullmatch(target) is not None


def is_included(
    rel_path: str,
    include: Sequence[str],
    exclude: Sequence[str],
) -> bool:
    """
    Decide whether *rel_path* is selected.

    Exclude patterns are checked first and always win. With no include
    patterns everything not excluded is selected.
    """
    file_name = rel_path.rsplit("/", 1)[-1]

    for pattern in exclude:
        if matches(pattern, rel_path, file_name):
            return False

    if not include:
        return True

    return any(matches(pattern, rel_path, file_name) for pattern in include)
