"""
Host platform detection for wclang.

The driver runs on the build host and targets Windows; the host platform
only matters for choosing where the host clang keeps its intrinsic headers
(lib vs lib64, Cygwin triples, Xcode toolchains).

Usage:
    from wclang.core.platform import detect_platform

    info = detect_platform()
    print(info.platform_string())
"""

import functools
import platform
from dataclasses import dataclass


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform information.

    Attributes:
        os: Operating system ('linux', 'macos', 'windows', 'cygwin', 'freebsd')
        arch: CPU architecture ('x64', 'x86', 'arm64', 'arm')
    """

    os: str
    arch: str

    def platform_string(self) -> str:
        """
        Get canonical platform string (e.g., 'linux-x64', 'macos-arm64').

        Example:
            >>> PlatformInfo('linux', 'x64').platform_string()
            'linux-x64'
        """
        return f"{self.os}-{self.arch}"

    def machine_triple_arch(self) -> str:
        """Architecture spelled the way GNU triples spell it."""
        arch_map = {
            "x64": "x86_64",
            "arm64": "aarch64",
            "x86": "i686",
            "arm": "armv7l",
        }
        return arch_map.get(self.arch, self.arch)

    def __str__(self) -> str:
        return self.platform_string()


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current host platform.

    This function is cached - it only runs detection once per process.
    """
    return PlatformInfo(os=_detect_os(), arch=_detect_architecture())


def _detect_os() -> str:
    """
    Detect operating system.

    Returns:
        Normalized OS name. Unknown systems are returned lower-cased as-is.
    """
    system = platform.system().lower()

    if system == "darwin":
        return "macos"
    if system.startswith("cygwin") or system.startswith("msys"):
        return "cygwin"
    return system


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm'
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i486", "i586", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        return machine


def clear_platform_cache():
    """
    Clear the platform detection cache.

    Useful for testing.
    """
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
]
