"""
Companion tool environment.

Build systems that cross-compile expect AR, RANLIB, WINDRES and friends to
name the target's binutils. The driver derives them from the resolved
triple, exposes them through the ``-wc-env`` introspection flags and
exports them to the compiler it launches.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from wclang.toolchain.targets import TargetTriple

COMPANION_TOOLS = (
    "AR",
    "AS",
    "CPP",
    "DLLTOOL",
    "DLLWRAP",
    "ELFEDIT",
    "GCOV",
    "GNAT",
    "LD",
    "NM",
    "OBJCOPY",
    "OBJDUMP",
    "RANLIB",
    "READELF",
    "SIZE",
    "STRINGS",
    "STRIP",
    "WINDMC",
    "WINDRES",
)


@dataclass(frozen=True)
class EnvironmentTable:
    """
    Mapping of companion tool variables to target-prefixed tool names.

    Example:
        >>> table = EnvironmentTable.for_target(triple)
        >>> table.lookup("ld")
        'x86_64-w64-mingw32-ld'
    """

    entries: Tuple[Tuple[str, str], ...]

    @classmethod
    def for_target(cls, triple: TargetTriple) -> "EnvironmentTable":
        return cls(
            tuple((tool, triple.tool_name(tool.lower())) for tool in COMPANION_TOOLS)
        )

    def lookup(self, tool: str) -> Optional[str]:
        """Value for ``tool`` (case-insensitive), or None if it is not a companion tool."""
        wanted = tool.upper()
        for name, value in self.entries:
            if name == wanted:
                return value
        return None

    def as_dict(self) -> Dict[str, str]:
        return dict(self.entries)

    def assignments(self) -> List[str]:
        """``NAME=value`` strings in table order."""
        return [f"{name}={value}" for name, value in self.entries]

    def render(self) -> str:
        """Single-line form printed by ``-wc-env``."""
        return " ".join(self.assignments())


__all__ = ["COMPANION_TOOLS", "EnvironmentTable"]
