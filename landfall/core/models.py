"""Data structures for jobs handled by post-download finalization."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from threading import Thread
from typing import Any, Dict, List, Optional


class MoveStatus(str, Enum):
    NONE = "none"
    SUCCESS = "success"
    FAILURE = "failure"


class CleanupStatus(str, Enum):
    NONE = "none"
    SUCCESS = "success"
    FAILURE = "failure"


class MessageKind(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    DETAIL = "detail"


@dataclass(frozen=True)
class JobMessage:
    kind: MessageKind
    text: str
    time: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "text": self.text, "time": self.time.isoformat()}


@dataclass
class PostJob:
    """One completed download awaiting finalization.

    `dest_dir` is where the job's files currently live: the intermediate
    directory until a move succeeds, the final directory afterwards.
    `final_dir` is empty when it should be derived from settings.
    """
    job_id: str
    name: str
    dest_dir: str
    final_dir: str = ""
    category: str = ""
    move_status: MoveStatus = MoveStatus.NONE
    cleanup_status: CleanupStatus = CleanupStatus.NONE
    working: bool = False
    messages: List[JobMessage] = field(default_factory=list)
    post_thread: Optional[Thread] = field(default=None, repr=False, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.job_id,
            "name": self.name,
            "dest_dir": self.dest_dir,
            "final_dir": self.final_dir,
            "category": self.category,
            "move_status": self.move_status.value,
            "cleanup_status": self.cleanup_status.value,
            "working": self.working,
            "message_count": len(self.messages),
        }


@dataclass(frozen=True)
class JobPaths:
    """Snapshot of the job fields a post-processing run needs.

    Copied out of the registry under its lock so no filesystem work happens
    while the lock is held.
    """
    name: str
    dest_dir: Path
    final_dir: Optional[Path]
    category: str = ""
