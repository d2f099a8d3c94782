"""Detection of obfuscated (randomised) release filenames."""

from __future__ import annotations

import re

from landfall.download.fs import file_extension

_HEX32_RE = re.compile(r"^[a-f0-9]{32}$")
_HEX_AND_DOTS_RE = re.compile(r"^[a-f0-9.]{40,}$")
_HEX30_RE = re.compile(r"[a-f0-9]{30}")
_BRACKET_GROUP_RE = re.compile(r"\[\w+\]")


def is_strongly_obfuscated(filename: str) -> bool:
    """True if the name is almost certainly meaningless.

    Only the unambiguous patterns are checked; names that merely look odd are
    left alone. The extension is ignored.

    >>> is_strongly_obfuscated("b082fa0beaa644d3aa01045d5b8d0b36.mkv")
    True
    >>> is_strongly_obfuscated("Some.Show.S01E01.mkv")
    False
    """
    ext = file_extension(filename)
    name = filename[: -len(ext)] if ext else filename

    if _HEX32_RE.match(name):
        return True

    if _HEX_AND_DOTS_RE.match(name):
        return True

    # e.g. "[BlaBla] something [More] something 5937bc5e32146e.bla"
    if _HEX30_RE.search(name) and len(_BRACKET_GROUP_RE.findall(name)) >= 2:
        return True

    return name.startswith("abc.xyz")
