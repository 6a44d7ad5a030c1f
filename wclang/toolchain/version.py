"""
Toolchain version model.

Header and intrinsic directories of GCC and clang installations are named
after the compiler version (``10-posix``, ``4.8.2``, ``18``). This module
parses such names permissively and picks the newest one in a directory.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"^(\d*)(?:\.(\d*)(?:\.(\d*))?)?")

# Predicate over (parent directory, entry name)
EntryFilter = Callable[[Path, str], bool]


@dataclass(frozen=True, order=True)
class CompilerVersion:
    """
    A (major, minor, patch) version plus the text it was parsed from.

    Ordering and equality only look at the numeric fields, compared as a
    tuple. The default instance is the "unset" version 0.0.0.

    Example:
        >>> CompilerVersion(1, 2, 3) < CompilerVersion(1, 3, 0)
        True
        >>> CompilerVersion.parse("10-win32")
        CompilerVersion(major=10, minor=0, patch=0, text='10-win32')
    """

    major: int = 0
    minor: int = 0
    patch: int = 0
    text: str = field(default="", compare=False)

    @classmethod
    def parse(cls, text: str) -> "CompilerVersion":
        """
        Parse a version from the start of ``text``.

        Leading digits are the major field; ``.digits`` after it the minor
        field; another ``.digits`` the patch field. Anything else is ignored
        and missing fields are 0, so garbage parses as 0.0.0.
        """
        match = _VERSION_RE.match(text)
        parts = [int(group) if group else 0 for group in match.groups()]
        return cls(parts[0], parts[1], parts[2], text)

    @property
    def is_set(self) -> bool:
        return (self.major, self.minor, self.patch) != (0, 0, 0)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def highest_version(
    directory: Union[str, Path], entry_filter: Optional[EntryFilter] = None
) -> Optional[CompilerVersion]:
    """
    Find the newest version-named subdirectory of ``directory``.

    Hidden entries and non-directories are skipped. Entries are visited in
    sorted order so equal versions resolve the same way on every run.

    Args:
        directory: Directory to list
        entry_filter: Optional predicate called with (directory, name)

    Returns:
        The highest version (its ``text`` is the directory name), or None if
        the directory cannot be listed or no entry parses as a version
    """
    directory = Path(directory)
    try:
        names = sorted(entry.name for entry in directory.iterdir())
    except OSError:
        return None

    best = None
    for name in names:
        if name.startswith("."):
            continue
        if not (directory / name).is_dir():
            continue
        if entry_filter is not None and not entry_filter(directory, name):
            continue
        version = CompilerVersion.parse(name)
        if best is None or version > best:
            best = version

    if best is None or not best.is_set:
        return None

    logger.debug(f"Highest version in {directory}: {best.text}")
    return best


__all__ = ["CompilerVersion", "highest_version", "EntryFilter"]
