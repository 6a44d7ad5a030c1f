"""
Mutable state of one driver run.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List


class OptimizationLevel(IntEnum):
    """Optimisation level requested with -O<x>."""

    LEVEL_0 = 0
    LEVEL_1 = 1
    LEVEL_2 = 2
    LEVEL_3 = 3
    FAST = 4
    SIZE_1 = 5
    SIZE_2 = 6

    @classmethod
    def from_flag(cls, value: str) -> "OptimizationLevel":
        """
        Map the text after ``-O`` to a level.

        ``s``/``z`` select the size levels and ``fast`` selects FAST. Anything
        else is read as a number (leading digits, 0 if none) clamped to 0..3.
        """
        if value.startswith("s"):
            return cls.SIZE_1
        if value.startswith("z"):
            return cls.SIZE_2
        if value == "fast":
            return cls.FAST
        digits = ""
        for char in value:
            if not char.isdigit():
                break
            digits += char
        return cls(min(int(digits or 0), cls.LEVEL_3))

    @property
    def is_optimizing(self) -> bool:
        return self is not OptimizationLevel.LEVEL_0


class ExceptionMode(Enum):
    """C++ exception handling requested on the command line."""

    UNSET = "unset"
    ENABLED = "enabled"
    DISABLED = "disabled"


class Subsystem(Enum):
    """How the final link is performed."""

    STANDARD = "standard"
    USE_MINGW_LINKER = "use-mingw-linker"
    WINDOWS = "windows"
    DLL = "dll"
    CONSOLE = "console"


class DeferredKind(Enum):
    """Pseudo-flags whose effect depends on whether this run links."""

    STATIC_RUNTIME = "static-runtime"
    USE_MINGW_LINKER = "use-mingw-linker"


@dataclass(frozen=True)
class DeferredAction:
    """
    A queued pseudo-flag.

    Attributes:
        kind: Which action to apply
        token: Command-line token as given (for verbose output)
    """

    kind: DeferredKind
    token: str


@dataclass
class CommandState:
    """
    Everything the argument passes learn about the invocation.

    Attributes:
        is_compile_step: -c/-S/-E seen
        is_link_step: -o seen, or defaulted after the sweep
        is_cxx: Current source language is C++
        exceptions: -fexceptions / -fno-exceptions in C++ mode
        optimization: Last -O level seen
        subsystem: Link mode selected by -m<subsystem> or use-mingw-linker
        cflags: Flags added for C compilations
        cxxflags: Flags added for C++ compilations
        linker_flags: Flags added for links
        verbose: -wc-verbose seen
        append_exe: -wc-append-exe seen
        no_intrinsics: -wc-no-intrin seen
        deferred: Actions waiting for the step classification
    """

    is_compile_step: bool = False
    is_link_step: bool = False
    is_cxx: bool = False
    exceptions: ExceptionMode = ExceptionMode.UNSET
    optimization: OptimizationLevel = OptimizationLevel.LEVEL_0
    subsystem: Subsystem = Subsystem.STANDARD
    cflags: List[str] = field(default_factory=list)
    cxxflags: List[str] = field(default_factory=list)
    linker_flags: List[str] = field(default_factory=list)
    verbose: bool = False
    append_exe: bool = False
    no_intrinsics: bool = False
    deferred: List[DeferredAction] = field(default_factory=list)

    @property
    def language_flags(self) -> List[str]:
        """Flag list for the current language (the list itself, not a copy)."""
        return self.cxxflags if self.is_cxx else self.cflags

    @property
    def is_passthrough_link(self) -> bool:
        """A link with the default linker needs no target or include flags."""
        return self.is_link_step and self.subsystem is Subsystem.STANDARD


__all__ = [
    "OptimizationLevel",
    "ExceptionMode",
    "Subsystem",
    "DeferredKind",
    "DeferredAction",
    "CommandState",
]
