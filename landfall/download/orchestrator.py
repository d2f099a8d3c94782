"""Post-processing job runner.

Each move or cleanup request gets its own worker thread. A run copies the
job's paths out of the registry, works on the filesystem without holding the
registry lock, then stores the resulting status and clears the job's
working flag.
"""

import threading
from functools import partial
from pathlib import Path
from typing import Callable, Optional

from landfall.core.logger import setup_logger
from landfall.core.models import CleanupStatus, MoveStatus
from landfall.core.queue import PostQueue, post_queue
from landfall.download.postprocess.pipeline import (
    JobReporter,
    build_final_dir_name,
    cleanup_tree,
    get_ext_cleanup_list,
    is_strongly_obfuscated,
    make_ext_matcher,
    relocate,
)

logger = setup_logger(__name__)

MOVE_LABEL = "Move for {name}"
CLEANUP_LABEL = "Cleanup for {name}"


def _reporter(job_id: str, queue: PostQueue) -> JobReporter:
    return JobReporter(job_id, logger, partial(queue.add_message, job_id))


def run_move(
    job_id: str,
    queue: PostQueue = post_queue,
    is_obfuscated: Callable[[str], bool] = is_strongly_obfuscated,
) -> Optional[MoveStatus]:
    """Move a job's files into its final directory and record the move status."""

    try:
        paths = queue.read_job_paths(job_id)
    except KeyError:
        logger.warning(f"Move requested for unknown job {job_id}")
        return None

    reporter = _reporter(job_id, queue)
    label = MOVE_LABEL.format(name=paths.name)
    status = MoveStatus.FAILURE
    final_dir: Optional[Path] = None

    try:
        final_dir = paths.final_dir or build_final_dir_name(paths)
        reporter.info(f"Moving completed files for {paths.name}")
        if relocate(paths, final_dir, reporter, is_obfuscated=is_obfuscated):
            status = MoveStatus.SUCCESS
    except Exception as e:
        logger.error_trace(f"{label} aborted: {e}")

    if status == MoveStatus.SUCCESS:
        reporter.info(f"{label} successful")
    else:
        reporter.error(f"{label} failed")

    try:
        queue.write_move_result(job_id, status, final_dir if status == MoveStatus.SUCCESS else None)
    except KeyError:
        logger.warning(f"Job {job_id} was removed before its move status could be stored")
    finally:
        queue.set_working(job_id, False)

    return status


def run_cleanup(job_id: str, queue: PostQueue = post_queue) -> Optional[CleanupStatus]:
    """Delete files matching the cleanup extension list from the job's directories."""

    try:
        paths = queue.read_job_paths(job_id)
    except KeyError:
        logger.warning(f"Cleanup requested for unknown job {job_id}")
        return None

    reporter = _reporter(job_id, queue)
    label = CLEANUP_LABEL.format(name=paths.name)
    status = CleanupStatus.FAILURE

    try:
        reporter.info(f"Cleaning up {paths.name}")
        matches = make_ext_matcher(get_ext_cleanup_list())

        result = cleanup_tree(paths.dest_dir, matches, reporter)
        if result.ok and paths.final_dir is not None and paths.final_dir != paths.dest_dir:
            result = result.merge(cleanup_tree(paths.final_dir, matches, reporter))

        if result.ok and result.deleted:
            reporter.info(f"{label} successful")
            status = CleanupStatus.SUCCESS
        elif result.ok:
            reporter.info(f"Nothing to cleanup for {paths.name}")
            status = CleanupStatus.SUCCESS
        else:
            reporter.error(f"{label} failed")
    except Exception as e:
        logger.error_trace(f"{label} aborted: {e}")
        reporter.error(f"{label} failed")

    try:
        queue.write_cleanup_status(job_id, status)
    except KeyError:
        logger.warning(f"Job {job_id} was removed before its cleanup status could be stored")
    finally:
        queue.set_working(job_id, False)

    return status


def _start_job(job_id: str, kind: str, target: Callable[..., object], queue: PostQueue) -> bool:
    thread = threading.Thread(
        target=target,
        args=(job_id, queue),
        daemon=True,
        name=f"{kind}-{job_id}",
    )
    if not queue.try_start(job_id, thread):
        logger.info(f"Job {job_id} is already being processed, {kind.lower()} not started")
        return False

    try:
        thread.start()
    except RuntimeError:
        queue.set_working(job_id, False)
        raise
    logger.debug(f"Started {kind.lower()} thread for job {job_id}")
    return True


def start_move_job(job_id: str, queue: PostQueue = post_queue) -> bool:
    """Run the move for `job_id` on its own thread.

    Returns False if the job is already working. Raises KeyError for an
    unknown job. If the thread cannot be started the job is left idle
    and the RuntimeError propagates.
    """
    return _start_job(job_id, "Move", run_move, queue)


def start_cleanup_job(job_id: str, queue: PostQueue = post_queue) -> bool:
    return _start_job(job_id, "Cleanup", run_cleanup, queue)
