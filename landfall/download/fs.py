"""Filesystem primitives used by post-download finalization.

Operations raise `OSError` on failure; callers decide whether a failure is
fatal, recorded or ignored. The one exception is `list_entries`, which treats
an unreadable directory as empty.
"""

import errno
import os
import re
import shutil
from pathlib import Path
from typing import Iterator

from landfall.core.logger import setup_logger

logger = setup_logger(__name__)

_INVALID_CHARS_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f\x7f]')

DUPLICATE_MARKER = "_duplicate"


def list_entries(directory: Path) -> Iterator[str]:
    """Yield the names of the direct children of `directory`.

    The directory handle stays open until the generator is exhausted or
    closed, so wrap partial iteration in `contextlib.closing`.
    """
    try:
        with os.scandir(directory) as it:
            for entry in it:
                yield entry.name
    except OSError as exc:
        logger.debug("Cannot list directory %s: %s", directory, exc)


def directory_exists(path: Path) -> bool:
    return path.is_dir()


def force_directories(path: Path) -> None:
    """Create `path` and any missing parents."""
    path.mkdir(parents=True, exist_ok=True)


def move_entry(source: Path, dest: Path) -> None:
    """Move a file or directory, falling back to copy+delete across filesystems."""
    try:
        os.rename(str(source), str(dest))
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise
        logger.debug("Cross-filesystem move, copying instead: %s -> %s", source, dest)
        shutil.move(str(source), str(dest))


def delete_file(path: Path) -> None:
    path.unlink()


def delete_directory_with_content(path: Path) -> None:
    shutil.rmtree(path)


def last_error_message(exc: BaseException) -> str:
    """Short diagnostic text for a failed filesystem call."""
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc) or type(exc).__name__


def file_extension(filename: str) -> str:
    """Return the extension of `filename` including the dot, or "" if it has none.

    Dot-files without a further dot (".hidden") have no extension.
    """
    index = filename.rfind(".")
    if index <= 0:
        return ""
    return filename[index:]


def make_valid_filename(name: str) -> str:
    """Replace characters that are illegal in filenames on common filesystems."""
    valid = _INVALID_CHARS_RE.sub("_", name).rstrip(". ")
    if valid in ("", ".", ".."):
        return "_"
    return valid


def make_unique_filename(directory: Path, basename: str) -> Path:
    """Return a path in `directory` that does not collide with any existing entry.

    A taken name gets a `_duplicateN` marker inserted before its extension.
    Uniqueness only holds at call time.
    """
    candidate = directory / basename
    if not os.path.lexists(candidate):
        return candidate

    ext = file_extension(basename)
    stem = basename[: -len(ext)] if ext else basename

    counter = 1
    while os.path.lexists(candidate):
        candidate = directory / f"{stem}{DUPLICATE_MARKER}{counter}{ext}"
        counter += 1
    return candidate
