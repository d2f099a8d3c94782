"""Move a finished job from its intermediate directory into its final directory."""

from __future__ import annotations

from contextlib import closing
from pathlib import Path
from typing import Callable

from landfall.core.models import JobPaths
from landfall.download.fs import (
    delete_directory_with_content,
    file_extension,
    force_directories,
    last_error_message,
    list_entries,
    make_unique_filename,
    make_valid_filename,
    move_entry,
)
from landfall.download.permissions_debug import log_permission_context

from .deobfuscation import is_strongly_obfuscated
from .policy import is_excluded_from_rename
from .types import JobReporter


def _same_directory(a: Path, b: Path) -> bool:
    try:
        return a.resolve() == b.resolve()
    except OSError:
        return a == b


def _move_one(source: Path, final_dir: Path, reporter: JobReporter) -> bool:
    """Move one entry; returns False only for a failed non-hidden move."""

    filename = source.name
    dest = make_unique_filename(final_dir, make_valid_filename(filename))
    hidden = filename.startswith(".")

    if not hidden:
        reporter.info(f"Moving file {filename} to {final_dir}")

    try:
        move_entry(source, dest)
    except OSError as exc:
        if hidden:
            return True
        log_permission_context("move_file", source, dest, error=exc)
        reporter.error(f"Could not move file {source} to {dest}: {last_error_message(exc)}")
        return False
    return True


def sanitize_filenames(
    final_dir: Path,
    job_name: str,
    reporter: JobReporter,
    is_obfuscated: Callable[[str], bool] = is_strongly_obfuscated,
) -> int:
    """Rename obfuscated entries of `final_dir` after the job name.

    Best-effort: failures are reported and skipped. Returns the number of
    entries renamed.
    """

    base_name = make_valid_filename(job_name)
    renamed = 0

    with closing(list_entries(final_dir)) as entries:
        for filename in entries:
            if not is_obfuscated(filename):
                continue

            target = base_name + file_extension(filename)
            if target == filename:
                continue

            source = final_dir / filename
            dest = make_unique_filename(final_dir, target)

            if is_excluded_from_rename(dest.name):
                continue

            try:
                move_entry(source, dest)
            except OSError as exc:
                log_permission_context("rename_file", source, dest, error=exc)
                reporter.error(f"Could not rename file {source} to {dest}: {last_error_message(exc)}")
                continue

            reporter.detail(f"Renamed obfuscated file {filename} to {dest.name}")
            renamed += 1

    return renamed


def relocate(
    paths: JobPaths,
    final_dir: Path,
    reporter: JobReporter,
    is_obfuscated: Callable[[str], bool] = is_strongly_obfuscated,
) -> bool:
    """Move every entry of the job's intermediate directory into `final_dir`.

    Returns True if `final_dir` could be created and every non-hidden entry
    was moved. Removing the intermediate directory and renaming obfuscated
    files are best-effort and do not change the result.
    """

    inter_dir = paths.dest_dir

    try:
        force_directories(final_dir)
    except OSError as exc:
        log_permission_context("create_final_dir", final_dir, error=exc)
        reporter.error(f"Could not create directory {final_dir}: {last_error_message(exc)}")
        return False

    if _same_directory(inter_dir, final_dir):
        reporter.info(f"Files for {paths.name} are already in {final_dir}")
        sanitize_filenames(final_dir, paths.name, reporter, is_obfuscated)
        return True

    ok = True

    # The listing handle must be closed before the directory is deleted.
    with closing(list_entries(inter_dir)) as entries:
        for filename in entries:
            if not _move_one(inter_dir / filename, final_dir, reporter):
                ok = False

    if ok:
        try:
            delete_directory_with_content(inter_dir)
        except OSError as exc:
            reporter.warning(
                f"Could not delete intermediate directory {inter_dir}: {last_error_message(exc)}"
            )

    sanitize_filenames(final_dir, paths.name, reporter, is_obfuscated)

    return ok
