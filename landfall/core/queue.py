"""Thread-safe registry of jobs awaiting post-processing."""

import uuid
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path
from threading import RLock, Thread
from typing import Any, Dict, Iterator, List, Optional

from landfall.core.logger import setup_logger
from landfall.core.models import (
    CleanupStatus,
    JobMessage,
    JobPaths,
    MessageKind,
    MoveStatus,
    PostJob,
)

logger = setup_logger(__name__)


class PostQueue:
    """Job registry shared by the HTTP surface and the job threads.

    Every access goes through the registry lock. Callers copy what they need
    out with `read_job_paths` and store results with the `write_*` methods;
    the lock is never held across filesystem I/O.
    """

    def __init__(self) -> None:
        self._jobs: Dict[str, PostJob] = {}
        self._lock = RLock()

    @contextmanager
    def guard(self) -> Iterator[Dict[str, PostJob]]:
        with self._lock:
            yield self._jobs

    def _require(self, job_id: str) -> PostJob:
        job = self._jobs.get(job_id)
        if job is None:
            raise KeyError(job_id)
        return job

    def add(self, job: PostJob) -> bool:
        with self._lock:
            if job.job_id in self._jobs:
                return False
            self._jobs[job.job_id] = job
        logger.debug(f"Job registered: {job.job_id} ({job.name})")
        return True

    def create(self, name: str, inter_dir: str, final_dir: str = "", category: str = "") -> PostJob:
        job = PostJob(
            job_id=uuid.uuid4().hex[:12],
            name=name,
            dest_dir=inter_dir,
            final_dir=final_dir,
            category=category,
        )
        self.add(job)
        return job

    def get_task(self, job_id: str) -> Optional[PostJob]:
        """Return a snapshot of the job, or None if unknown."""
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return None
            return replace(job, messages=list(job.messages))

    def remove(self, job_id: str) -> bool:
        with self._lock:
            return self._jobs.pop(job_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._jobs.clear()

    def read_job_paths(self, job_id: str) -> JobPaths:
        with self._lock:
            job = self._require(job_id)
            return JobPaths(
                name=job.name,
                dest_dir=Path(job.dest_dir),
                final_dir=Path(job.final_dir) if job.final_dir else None,
                category=job.category,
            )

    def write_move_result(self, job_id: str, status: MoveStatus, dest_dir: Optional[Path] = None) -> None:
        """Store the move outcome; on success the job now lives in `dest_dir`."""
        with self._lock:
            job = self._require(job_id)
            if status == MoveStatus.SUCCESS and dest_dir is not None:
                job.dest_dir = str(dest_dir)
                job.final_dir = ""
            job.move_status = status

    def write_cleanup_status(self, job_id: str, status: CleanupStatus) -> None:
        with self._lock:
            self._require(job_id).cleanup_status = status

    def try_start(self, job_id: str, thread: Thread) -> bool:
        """Mark the job working and attach its thread. False if already working."""
        with self._lock:
            job = self._require(job_id)
            if job.working:
                return False
            job.working = True
            job.post_thread = thread
            return True

    def set_working(self, job_id: str, working: bool) -> None:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is not None:
                job.working = working

    def add_message(self, job_id: str, kind: MessageKind, text: str) -> None:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is not None:
                job.messages.append(JobMessage(kind=kind, text=text))

    def get_messages(self, job_id: str) -> List[JobMessage]:
        with self._lock:
            return list(self._require(job_id).messages)

    def get_status(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [job.to_dict() for job in self._jobs.values()]


post_queue = PostQueue()
