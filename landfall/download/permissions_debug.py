"""Permission/ownership diagnostics for failed filesystem operations.

Only call these from failure paths. Collecting context is best-effort and
never raises, so it cannot mask the original error.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from landfall.core.logger import setup_logger

logger = setup_logger(__name__)


def _format_uid(uid: int) -> str:
    try:
        import pwd

        return pwd.getpwuid(uid).pw_name
    except (ImportError, KeyError):
        return str(uid)


def _format_gid(gid: int) -> str:
    try:
        import grp

        return grp.getgrgid(gid).gr_name
    except (ImportError, KeyError):
        return str(gid)


def _describe_process(label: str, error: Optional[BaseException]) -> None:
    if not hasattr(os, "geteuid"):
        return
    euid = os.geteuid()
    egid = os.getegid()
    logger.debug(
        "Permission context (%s): euid=%s(%d) egid=%s(%d) groups=%s error=%s",
        label,
        _format_uid(euid),
        euid,
        _format_gid(egid),
        egid,
        [f"{_format_gid(g)}({g})" for g in os.getgroups()],
        error,
    )


def _describe_path(label: str, probe: Path) -> None:
    try:
        st = probe.stat()
    except OSError as stat_error:
        logger.debug("Path permissions (%s): stat failed for %s: %s", label, probe, stat_error)
        return
    logger.debug(
        "Path permissions (%s): path=%s mode=%s owner=%s(%d) group=%s(%d) dir=%s",
        label,
        probe,
        oct(st.st_mode & 0o777),
        _format_uid(st.st_uid),
        st.st_uid,
        _format_gid(st.st_gid),
        st.st_gid,
        probe.is_dir(),
    )


def log_permission_context(label: str, *paths: Path, error: Optional[BaseException] = None) -> None:
    """Log process identity plus mode/ownership of each path and its parent."""

    if not isinstance(error, PermissionError) and error is not None:
        return

    try:
        _describe_process(label, error)
        seen = set()
        for path in paths:
            for probe in (path, path.parent):
                if probe in seen:
                    continue
                seen.add(probe)
                _describe_path(label, probe)
    except Exception as context_error:
        logger.debug("Permission context (%s): failed to collect: %s", label, context_error)
