"""
MinGW target triples.

Every supported triple belongs to one of two families (32-bit and 64-bit
Windows). Each family lists its spellings in priority order: mainstream
mingw-w64 first, then MXE static/shared builds, then the older mingw32 and
mingw32msvc distributions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class TargetFamily(Enum):
    """Bit-width family of a Windows target."""

    WIN32 = "32 bit"
    WIN64 = "64 bit"

    @property
    def description(self) -> str:
        return self.value


TARGET_TRIPLES = {
    TargetFamily.WIN32: (
        "i686-w64-mingw32",
        "i686-w64-mingw32.static",  # MXE
        "i686-w64-mingw32.shared",  # MXE
        "i686-pc-mingw32",
        "i586-mingw32",
        "i586-mingw32msvc",
        "i486-mingw32",
    ),
    TargetFamily.WIN64: (
        "x86_64-w64-mingw32",
        "x86_64-w64-mingw32.static",  # MXE
        "x86_64-w64-mingw32.shared",  # MXE
        "amd64-mingw32msvc",
    ),
}

# Invocation-name prefixes that ask for "any installed triple of this family"
FAMILY_MARKERS = (
    ("w32", TargetFamily.WIN32),
    ("w64", TargetFamily.WIN64),
)


@dataclass(frozen=True)
class TargetTriple:
    """
    A resolved cross-compilation target.

    Attributes:
        name: Triple spelling (e.g., 'x86_64-w64-mingw32')
        family: Bit-width family the spelling belongs to
    """

    name: str
    family: TargetFamily

    @property
    def arch(self) -> Optional[str]:
        """CPU part of the triple, or None if the triple has no '-'."""
        head, sep, _ = self.name.partition("-")
        return head if sep else None

    @property
    def is_64bit(self) -> bool:
        return self.family is TargetFamily.WIN64

    def tool_name(self, tool: str) -> str:
        """Name of a target-prefixed binutils/gcc tool (e.g., 'x86_64-w64-mingw32-ar')."""
        return f"{self.name}-{tool}"

    def __str__(self) -> str:
        return self.name


def family_triples(family: TargetFamily) -> Tuple[str, ...]:
    """Triple spellings of ``family`` in probing order."""
    return TARGET_TRIPLES[family]


def match_triple(prefix: str) -> Optional[TargetTriple]:
    """
    Match an invocation-name prefix against the known triples exactly.

    Example:
        >>> match_triple("i686-w64-mingw32").family
        <TargetFamily.WIN32: '32 bit'>
    """
    for family, triples in TARGET_TRIPLES.items():
        if prefix in triples:
            return TargetTriple(prefix, family)
    return None


def match_family_marker(prefix: str) -> Optional[TargetFamily]:
    """Return the family a generic prefix such as 'w64' asks for, if any."""
    for marker, family in FAMILY_MARKERS:
        if prefix.startswith(marker):
            return family
    return None


__all__ = [
    "TargetFamily",
    "TargetTriple",
    "TARGET_TRIPLES",
    "FAMILY_MARKERS",
    "family_triples",
    "match_triple",
    "match_family_marker",
]
