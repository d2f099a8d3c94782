"""Post-processing policy.

Configuration-driven decisions shared by the move and cleanup steps: which
files the cleaner deletes and which names the rename pass must not touch.
"""

from __future__ import annotations

import fnmatch
import re
from functools import partial
from typing import Callable, List

import landfall.core.config as core_config

EXT_LIST_SEPARATORS = ",;"

# Technical files the obfuscation rename pass must not touch.
EXCLUDED_EXTENSIONS = (".par2", ".nzb")


def split_ext_list(ext_list: str, separators: str = EXT_LIST_SEPARATORS) -> List[str]:
    tokens = re.split(f"[{re.escape(separators)}]", ext_list)
    return [token.strip() for token in tokens if token.strip()]


def match_file_ext(filename: str, ext_list: str, separators: str = EXT_LIST_SEPARATORS) -> bool:
    """True if `filename` matches any entry of a delimited extension list.

    Plain entries match as a case-insensitive suffix (".nfo" matches
    "Movie.NFO"); entries containing `*` or `?` must match the whole name.
    """
    lowered = filename.lower()
    for ext in split_ext_list(ext_list, separators):
        ext = ext.lower()
        if lowered.endswith(ext):
            return True
        if ("*" in ext or "?" in ext) and fnmatch.fnmatchcase(lowered, ext):
            return True
    return False


def make_ext_matcher(ext_list: str) -> Callable[[str], bool]:
    return partial(match_file_ext, ext_list=ext_list)


def get_ext_cleanup_list() -> str:
    value = core_config.config.get("EXT_CLEANUP_DISK", "")
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value or "")


def is_excluded_from_rename(filename: str) -> bool:
    lowered = filename.lower()
    return any(lowered.endswith(ext) for ext in EXCLUDED_EXTENSIONS)
