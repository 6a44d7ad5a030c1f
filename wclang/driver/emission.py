"""
Pass three of the driver pipeline: building the final argument vector.

The vector is a fixed prefix followed by the user's surviving arguments in
their original order:

    <compiler> <language flags> <linker flags>
    [-target <triple> -nostdinc -nostdinc++ -Qunused-arguments
     <workarounds> -isystem <intrinsic>... -isystem <c++>... -isystem <c>...]
    <user arguments minus pseudo-flags>

The bracketed part is left out for a plain link with the default linker.
"""

import logging
import os
from typing import List, Sequence

from wclang.core.config import DriverSettings
from wclang.driver.arguments import pseudo_flag_name
from wclang.driver.state import CommandState, ExceptionMode, Subsystem
from wclang.toolchain.headers import HeaderSearchPaths
from wclang.toolchain.targets import TargetTriple
from wclang.toolchain.version import CompilerVersion

logger = logging.getLogger(__name__)

TARGET_OPTION = "-target"
NO_STDINC_FLAGS = ("-nostdinc", "-nostdinc++")
CROSS_COMPILER_FLAG = "-Qunused-arguments"

EXECUTABLE_SUFFIXES = (".exe", ".dll", ".S")

# clang 3.5.0: "redeclaration of '_scanf_l' cannot add 'dllimport' attribute"
STDIO_WORKAROUND_VERSION = CompilerVersion(3, 5, 0)
STDIO_WORKAROUND_FLAG = "-D_STDIO_S_DEFINED"

EXCEPTIONS_MIN_VERSION = CompilerVersion(3, 7, 0)
WIN32_EXCEPTIONS_MIN_VERSION = CompilerVersion(6, 0, 0)


def exception_flags(
    state: CommandState,
    triple: TargetTriple,
    clang_version: CompilerVersion,
    settings: DriverSettings,
) -> List[str]:
    """
    Flags controlling C++ exceptions for the detected clang.

    Older clang releases cannot produce working MinGW exceptions, so they
    are switched off unless forced on through the environment. Forcing
    resets the mode to unset so a user's ``-fexceptions`` is forwarded.
    An undetected clang version (0.0.0) counts as old.
    32-bit targets use SJLJ unwinding from clang 6 on.
    """
    flags = []

    if state.exceptions is not ExceptionMode.DISABLED:
        too_old = clang_version < EXCEPTIONS_MIN_VERSION or (
            not triple.is_64bit and clang_version < WIN32_EXCEPTIONS_MIN_VERSION
        )
        if too_old:
            if settings.force_cxx_exceptions:
                state.exceptions = ExceptionMode.UNSET
            else:
                if state.exceptions is ExceptionMode.ENABLED:
                    logger.warning(
                        "-fexceptions will be replaced with -fno-exceptions: "
                        "exceptions are not supported (yet); set "
                        "WCLANG_FORCE_CXX_EXCEPTIONS to 1 (env. variable) "
                        "to force C++ exceptions"
                    )
                flags.append("-fno-exceptions")

    if not triple.is_64bit and clang_version >= WIN32_EXCEPTIONS_MIN_VERSION:
        flags.append("-fsjlj-exceptions")

    return flags


def toolchain_flags(
    state: CommandState,
    triple: TargetTriple,
    headers: HeaderSearchPaths,
    settings: DriverSettings,
) -> List[str]:
    """Target selection, workarounds and include directories."""
    flags = [TARGET_OPTION, triple.name, *NO_STDINC_FLAGS, CROSS_COMPILER_FLAG]

    if headers.clang_version == STDIO_WORKAROUND_VERSION:
        flags.append(STDIO_WORKAROUND_FLAG)

    flags.extend(exception_flags(state, triple, headers.clang_version, settings))

    if settings.no_integrated_as:
        flags.append("-no-integrated-as")

    flags.extend(headers.include_arguments(include_intrinsics=not state.no_intrinsics))
    return flags


def passthrough_arguments(args: Sequence[str], state: CommandState) -> List[str]:
    """
    User arguments that reach the compiler, in their original order.

    Pseudo-flags never survive; ``-fexceptions`` is dropped once resolved;
    ``-Qunused*`` is dropped when the link is delegated, since the MinGW
    gcc driver does not know it.
    """
    delegated_link = state.is_link_step and state.subsystem is not Subsystem.STANDARD
    kept = []
    for arg in args:
        if pseudo_flag_name(arg) is not None:
            continue
        if state.exceptions is ExceptionMode.ENABLED and arg == "-fexceptions":
            continue
        if delegated_link and arg.startswith("-Qunused"):
            continue
        kept.append(arg)
    return kept


def append_exe_suffix(args: List[str]) -> bool:
    """
    Append ``.exe`` to the output file name in ``args``, in place.

    Nothing happens when ``-c`` is present, when there is no usable ``-o``,
    or when the name already ends in ``.exe``, ``.dll`` or ``.S``.

    Returns:
        True if the output name was changed
    """
    if "-c" in args:
        return False

    for index, arg in enumerate(args):
        if not arg.startswith("-o"):
            continue
        if arg == "-o":
            position = index + 1
            if position >= len(args) or args[position].startswith("-"):
                return False
            filename = args[position]
        else:
            position = index
            filename = arg[2:]

        if os.path.splitext(filename)[1] in EXECUTABLE_SUFFIXES:
            return False

        logger.warning(f'appending ".exe" to output filename "{filename}"')
        args[position] += ".exe"
        return True

    return False


def build_arguments(
    compiler: str,
    args: Sequence[str],
    state: CommandState,
    triple: TargetTriple,
    headers: HeaderSearchPaths,
    settings: DriverSettings,
) -> List[str]:
    """
    Assemble the complete argument vector, ``compiler`` first.

    Args:
        compiler: Absolute path of the compiler to launch
        args: User arguments (without the program name)
        state: State after passes one and two
        triple: Resolved target
        headers: Include directories, intrinsics already probed
        settings: Environment switches

    Returns:
        Argument vector suitable for exec
    """
    out = [compiler, *state.language_flags, *state.linker_flags]

    if not state.is_passthrough_link:
        out.extend(toolchain_flags(state, triple, headers, settings))

    out.extend(passthrough_arguments(args, state))

    if state.append_exe:
        append_exe_suffix(out)

    return out


__all__ = [
    "exception_flags",
    "toolchain_flags",
    "passthrough_arguments",
    "append_exe_suffix",
    "build_arguments",
]
