from __future__ import annotations

from pathlib import Path

import landfall.core.config as core_config
from landfall.core.models import JobPaths
from landfall.download.fs import make_valid_filename


def build_final_dir_name(paths: JobPaths) -> Path:
    """Derive the final directory for a job that has none set.

    DEST_DIR, then the category (when APPEND_CATEGORY_DIR is on), then the
    job name.
    """

    final_dir = Path(core_config.config.get("DEST_DIR", "/downloads/completed"))

    if paths.category and core_config.config.get("APPEND_CATEGORY_DIR", True):
        final_dir = final_dir / make_valid_filename(paths.category)

    return final_dir / make_valid_filename(paths.name)
