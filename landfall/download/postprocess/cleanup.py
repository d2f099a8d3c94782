"""Recursive deletion of junk files by extension."""

from __future__ import annotations

from contextlib import closing
from pathlib import Path
from typing import Callable

from landfall.download.fs import delete_file, directory_exists, last_error_message, list_entries
from landfall.download.permissions_debug import log_permission_context

from .types import CleanupResult, JobReporter


def cleanup_tree(
    directory: Path,
    matches: Callable[[str], bool],
    reporter: JobReporter,
) -> CleanupResult:
    """Delete every file below `directory` whose name `matches`.

    Subdirectories are walked first and are never deleted themselves.
    Symlinked directories are not followed. A failed deletion clears `ok`
    but iteration continues; `deleted` is set for every match, whether or
    not its deletion succeeded.
    """

    ok = True
    deleted = False

    with closing(list_entries(directory)) as entries:
        for filename in entries:
            full_path = directory / filename
            is_dir = directory_exists(full_path)

            if is_dir and not full_path.is_symlink():
                sub_result = cleanup_tree(full_path, matches, reporter)
                ok = sub_result.ok and ok
                deleted = sub_result.deleted or deleted

            if is_dir or not matches(filename):
                continue

            reporter.info(f"Deleting file {filename}")
            try:
                delete_file(full_path)
            except OSError as exc:
                log_permission_context("delete_file", full_path, error=exc)
                reporter.error(f"Could not delete file {full_path}: {last_error_message(exc)}")
                ok = False

            deleted = True

    return CleanupResult(ok=ok, deleted=deleted)
