"""Shared fixtures: isolated settings, a private job registry and job directories."""

import os

# Keep test runs from writing log files outside the temp area.
os.environ.setdefault("ENABLE_LOGGING", "false")

from pathlib import Path
from typing import List, Tuple

import pytest

from landfall.core.logger import setup_logger
from landfall.core.models import MessageKind
from landfall.core.queue import PostQueue
from landfall.download.postprocess.pipeline import JobReporter

SETTING_KEYS = ("DEST_DIR", "APPEND_CATEGORY_DIR", "EXT_CLEANUP_DISK")


class MessageRecorder:
    """Collects job messages emitted through a JobReporter."""

    def __init__(self):
        self.messages: List[Tuple[MessageKind, str]] = []
        self.reporter = JobReporter("test-job", setup_logger("tests"), self.record)

    def record(self, kind: MessageKind, text: str) -> None:
        self.messages.append((kind, text))

    def texts(self, kind: MessageKind) -> List[str]:
        return [text for k, text in self.messages if k == kind]

    @property
    def errors(self) -> List[str]:
        return self.texts(MessageKind.ERROR)

    @property
    def warnings(self) -> List[str]:
        return self.texts(MessageKind.WARNING)

    @property
    def infos(self) -> List[str]:
        return self.texts(MessageKind.INFO)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory, monkeypatch):
    """Point CONFIG_DIR at a fresh directory and drop env overrides."""
    from landfall.core.config import config

    config_dir = tmp_path_factory.mktemp("config")
    monkeypatch.setattr("landfall.config.env.CONFIG_DIR", config_dir)
    for key in SETTING_KEYS:
        monkeypatch.delenv(key, raising=False)
    config.refresh()
    yield config_dir
    config.refresh()


@pytest.fixture
def queue() -> PostQueue:
    return PostQueue()


@pytest.fixture
def recorder() -> MessageRecorder:
    return MessageRecorder()


@pytest.fixture
def job_dirs(tmp_path: Path):
    """Create an intermediate directory; the final directory is left absent."""
    inter = tmp_path / "intermediate" / "Some.Show.S01E01"
    inter.mkdir(parents=True)
    final = tmp_path / "completed" / "Some.Show.S01E01"
    return {"base": tmp_path, "inter": inter, "final": final}
