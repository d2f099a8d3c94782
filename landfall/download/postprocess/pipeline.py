"""Post-download finalization pipeline.

Public API surface for post-processing. Implementation lives in submodules:

- `types`: result and reporting helpers
- `policy`: extension cleanup list and rename exclusions
- `deobfuscation`: obfuscated filename detection
- `destination`: final directory naming
- `relocate`: moving a job into its final directory
- `cleanup`: recursive extension-based deletion
"""

from __future__ import annotations

from .cleanup import cleanup_tree
from .deobfuscation import is_strongly_obfuscated
from .destination import build_final_dir_name
from .policy import (
    EXCLUDED_EXTENSIONS,
    get_ext_cleanup_list,
    is_excluded_from_rename,
    make_ext_matcher,
    match_file_ext,
    split_ext_list,
)
from .relocate import relocate, sanitize_filenames
from .types import CleanupResult, JobReporter

__all__ = [
    "EXCLUDED_EXTENSIONS",
    "CleanupResult",
    "JobReporter",
    "build_final_dir_name",
    "cleanup_tree",
    "get_ext_cleanup_list",
    "is_excluded_from_rename",
    "is_strongly_obfuscated",
    "make_ext_matcher",
    "match_file_ext",
    "relocate",
    "sanitize_filenames",
    "split_ext_list",
]
