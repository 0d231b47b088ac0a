"""
Core logic for ctxfile package.
"""

from __future__ import annotations

import os
import stat
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import pathspec
from colorama import Fore, Style

from .matcher import is_included

# Exceptions
class CtxfileError(Exception): ...
class WalkError(CtxfileError): ...
class OutputWriteError(CtxfileError): ...


class FileReadError(CtxfileError):
    """A selected file could not be read; its block is left out."""

    def __init__(self, rel_path: str, reason: OSError) -> None:
        super().__init__(f"Error reading file {rel_path}: {reason}")
        self.rel_path = rel_path
        self.reason = reason


DEFAULT_OUTPUT = "context.txt"
INDENT = "    "


@dataclass(frozen=True)
class ScanConfig:
    root: Path
    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    output: str = DEFAULT_OUTPUT
    use_gitignore: bool = False
    verbose: bool = False

    @property
    def output_path(self) -> Path:
        # an absolute name is re-rooted, so the file always lands under root
        return self.root / self.output.lstrip("/")


@dataclass
class Collection:
    files: List[str] = field(default_factory=list)
    entries: Dict[str, bool] = field(default_factory=dict)

    def add(self, rel_path: str) -> None:
        """Record a selected file and every ancestor directory it implies."""
        self.files.append(rel_path)
        parts = rel_path.split("/")
        for depth in range(1, len(parts)):
            self.entries["/".join(parts[:depth])] = True
        self.entries[rel_path] = False


# Console helpers
def _note(msg: str) -> None:
    print(f"[ctxfile] {msg}")


def _warn(msg: str) -> None:
    print(Fore.YELLOW + msg + Style.RESET_ALL, file=sys.stderr)


# Ignore-file utilities
def load_gitignore(root: Path) -> "pathspec.PathSpec":
    gitignore_path = root / ".gitignore"
    if not gitignore_path.is_file():
        return pathspec.PathSpec.from_lines("gitwildmatch", [])
    try:
        with gitignore_path.open("r", encoding="utf-8") as fh:
            return pathspec.PathSpec.from_lines("gitwildmatch", fh)
    except (OSError, UnicodeDecodeError) as e:
        raise WalkError(f"Could not read '{gitignore_path}': {e}")


# Walking
def _scan(directory: Path, prefix: str) -> Iterator[Tuple[str, bool]]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        raise WalkError(f"Could not scan directory '{directory}': {e}")

    for entry in entries:
        try:
            mode = entry.stat(follow_symlinks=False).st_mode
        except OSError as e:
            raise WalkError(f"Could not stat '{entry.path}': {e}")
        yield prefix + entry.name, stat.S_ISDIR(mode)


def _walk(root: Path) -> Iterator[str]:
    """
    Yield root-relative posix paths of every non-directory entry.

    Depth-first, entries of each directory in name order. Symlinks are
    reported as leaves and never followed. Each entry is lstat'ed, so one
    that vanishes mid-walk is a :class:`WalkError`.
    """
    stack = [_scan(root, "")]
    while stack:
        item = next(stack[-1], None)
        if item is None:
            stack.pop()
            continue
        rel, is_dir = item
        if is_dir:
            stack.append(_scan(root / rel, rel + "/"))
        else:
            yield rel


def collect(config: ScanConfig) -> Collection:
    """Walk ``config.root`` and gather the selected files."""
    root = config.root
    if not root.exists():
        raise WalkError(f"Root directory '{root}' does not exist")
    if not root.is_dir():
        raise WalkError(f"Root path '{root}' is not a directory")

    ignore_spec = load_gitignore(root) if config.use_gitignore else None
    if config.verbose:
        _note(f"Scanning {root} …")

    collection = Collection()
    seen = 0
    for rel in _walk(root):
        seen += 1
        if ignore_spec is not None and ignore_spec.match_file(rel):
            continue
        if not is_included(rel, config.include, config.exclude):
            continue
        collection.add(rel)

    if config.verbose:
        _note(f"{seen} files found, {len(collection.files)} selected.")
    return collection


# Tree renderer
def render_tree(entries: Dict[str, bool]) -> str:
    """
    Render the path entries as an indented listing.

    Paths are sorted as plain strings rather than walked as a hierarchy, so
    a nested entry can land between two shallower siblings.
    """
    lines = []
    for path in sorted(entries):
        name = path.rsplit("/", 1)[-1]
        suffix = "/" if entries[path] else ""
        lines.append(f"{INDENT * path.count('/')}{name}{suffix}\n")
    return "".join(lines)


# Content assembly
def assemble_content(
    config: ScanConfig, files: List[str]
) -> Tuple[bytes, List[FileReadError]]:
    """Concatenate a header plus raw bytes for each file, in walk order."""
    chunks: List[bytes] = []
    errors: List[FileReadError] = []
    for rel in files:
        try:
            raw = (config.root / rel).read_bytes()
        except OSError as e:
            err = FileReadError(rel, e)
            errors.append(err)
            _warn(str(err))
            continue
        chunks.append(_encode(f"\n=== File: {rel} ===\n"))
        chunks.append(raw)
        chunks.append(b"\n")
    return b"".join(chunks), errors


def _encode(text: str) -> bytes:
    return text.encode("utf-8", errors="surrogateescape")


def build_document(config: ScanConfig, collection: Collection) -> bytes:
    content, errors = assemble_content(config, collection.files)
    if config.verbose and errors:
        _note(f"{len(errors)} file(s) skipped.")
    return _encode(render_tree(collection.entries)) + b"\n" + content


# Main writer
def write_output(config: ScanConfig, document: bytes) -> Path:
    out_path = config.output_path
    try:
        out_path.write_bytes(document)
    except OSError as e:
        raise OutputWriteError(f"Could not write output file '{out_path}': {e}")
    return out_path.absolute()


def generate(config: ScanConfig) -> Optional[Path]:
    """
    Run collect → render → write.

    Returns the absolute output path, or ``None`` when nothing matched (no
    file is written in that case).
    """
    collection = collect(config)
    if not collection.files:
        return None
    document = build_document(config, collection)
    out_path = write_output(config, document)
    if config.verbose:
        _note(f"Done → {out_path}. {len(document)} bytes written.")
    return out_path
