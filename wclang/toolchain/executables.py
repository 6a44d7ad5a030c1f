"""
Executable lookup on the command search path.

Compiler cache wrappers (ccache, sccache) are commonly installed as
``/usr/lib/ccache/clang`` symlinks ahead of the real compiler on PATH. The
driver needs the real binary: its location decides where the clang resource
headers are, and launching the wrapper would cache the wrong command line.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from wclang.core.exceptions import ExecutableNotFoundError

logger = logging.getLogger(__name__)

BUILD_CACHE_WRAPPERS = ("ccache", "sccache")


def is_build_cache_wrapper(path: Path) -> bool:
    """Whether ``path`` names a compiler cache binary."""
    return path.name.startswith(BUILD_CACHE_WRAPPERS)


def find_executable(command: str, search_path: Optional[str]) -> Optional[Path]:
    """
    Find the real executable for ``command`` on ``search_path``.

    Symlinks are resolved and matches that resolve to a build cache wrapper
    are skipped, so the result is always the underlying binary.

    Args:
        command: Executable name (e.g., 'clang++')
        search_path: PATH-style directory list

    Returns:
        Fully resolved path of the executable, or None if not found
    """
    for entry in (search_path or "").split(os.pathsep):
        if not entry:
            continue
        candidate = Path(entry) / command
        if not candidate.is_file() or not os.access(candidate, os.X_OK):
            continue
        real = candidate.resolve()
        if is_build_cache_wrapper(real):
            logger.debug(f"Skipping build cache wrapper {candidate} -> {real}")
            continue
        return real
    return None


def command_directory(command: str, search_path: Optional[str]) -> Path:
    """
    Directory holding the real ``command`` binary.

    Raises:
        ExecutableNotFoundError: If ``command`` is not on ``search_path``
    """
    found = find_executable(command, search_path)
    if found is None:
        raise ExecutableNotFoundError(command)
    return found.parent


def resolve_command(command: str, search_path: Optional[str]) -> Path:
    """
    Absolute path used to launch ``command``.

    The name is kept and joined to the real binary's directory, so
    ``clang`` symlinked to ``clang-18`` still runs as ``clang``.

    Raises:
        ExecutableNotFoundError: If ``command`` is not on ``search_path``
    """
    if os.path.isabs(command):
        return Path(command)
    return command_directory(command, search_path) / command


def prepend_search_path(directory: str, search_path: Optional[str]) -> str:
    """Return ``search_path`` with ``directory`` in front."""
    if not search_path:
        return directory
    return f"{directory}{os.pathsep}{search_path}"


__all__ = [
    "BUILD_CACHE_WRAPPERS",
    "is_build_cache_wrapper",
    "find_executable",
    "command_directory",
    "resolve_command",
    "prepend_search_path",
]
