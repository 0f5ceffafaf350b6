# walk.py - enumerate the Word documents under a folder

import os
from typing import Iterable, Iterator, Set

from .errors import SearchError

LOCK_FILE_MARKER = "~$"
DEFAULT_EXTS = "docx"


def normalize_ext(ext: str) -> str:
    return ext.lower().lstrip(".")


def parse_list(value: str) -> Set[str]:
    """Split a ``;`` or ``,`` separated option into a lower-cased set."""

    return set(
        e.strip().lower()
        for e in (value or "").replace(",", ";").split(";")
        if e.strip()
    )


def parse_exts(value: str) -> Set[str]:
    exts = {normalize_ext(e) for e in parse_list(value)}
    return exts or {DEFAULT_EXTS}


def is_target(path: str, exts: Set[str]) -> bool:
    name = os.path.basename(path)
    # Word keeps "~$name.docx" owner files next to open documents
    if LOCK_FILE_MARKER in name:
        return False
    return normalize_ext(os.path.splitext(name)[1]) in exts


def iter_documents(root: str, exts: Set[str], excluded: Iterable[str] = ()) -> Iterator[str]:
    """Yield absolute paths of target documents under ``root`` in lexical order."""

    root = os.path.abspath(root)
    if not os.path.isdir(root):
        raise SearchError("walk", f"not a directory: {root}")

    excluded_lower = {name.lower() for name in excluded}
    return _walk(root, exts, excluded_lower)


def _walk(directory: str, exts: Set[str], excluded_lower: Set[str]) -> Iterator[str]:
    # entries sorted by name; a subfolder is entered where its name sorts
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        raise SearchError("walk", f"{exc.filename or directory}: {exc.strerror or exc}")

    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            if entry.name.lower() not in excluded_lower:
                yield from _walk(entry.path, exts, excluded_lower)
        elif is_target(entry.path, exts):
            yield entry.path
