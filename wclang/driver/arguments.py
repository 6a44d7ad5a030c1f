"""
Argument classification: passes one and two of the driver pipeline.

Pass one sweeps the raw command line once. It records compiler flags the
driver has to react to (step selection, language, optimisation, subsystem,
exceptions) and handles the driver's own ``-wc-`` pseudo-flags. Pseudo-flags
whose effect depends on whether this run links are queued as
:class:`DeferredAction` records, because that is only known once the sweep
is complete.

After the sweep the step classification is normalised, then pass two
applies the queued actions.

Usage:
    state = CommandState(is_cxx=identity.is_cxx)
    classify_arguments(argv[1:], state, context)
    normalize_steps(state)
    apply_deferred(state)
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from wclang import __version__
from wclang.core.exceptions import DriverExit, UnknownArgumentError, UsageError
from wclang.driver.state import (
    CommandState,
    DeferredAction,
    DeferredKind,
    ExceptionMode,
    OptimizationLevel,
    Subsystem,
)
from wclang.toolchain.environment import COMPANION_TOOLS, EnvironmentTable
from wclang.toolchain.headers import HeaderDiscovery, HeaderSearchPaths
from wclang.toolchain.targets import TargetTriple

logger = logging.getLogger(__name__)

PACKAGE_NAME = "wclang"
PSEUDO_FLAG_PREFIX = "-wc-"

COMPILE_ONLY_FLAGS = ("-c", "-S", "-E")

SUBSYSTEM_FLAGS = {
    "-mwindows": Subsystem.WINDOWS,
    "-mdll": Subsystem.DLL,
    "-mconsole": Subsystem.CONSOLE,
}

C_LANGUAGES = ("c", "c-header")
CXX_LANGUAGES = ("c++", "c++-header")
# Accepted with -x but leave the C/C++ mode alone
NEUTRAL_LANGUAGES = ("none", "assembler", "assembler-with-cpp")

STATIC_LIBGCC = "-static-libgcc"
STATIC_LIBSTDCXX = "-static-libstdc++"

PSEUDO_FLAG_HELP = (
    ("version", "show version"),
    ("target", "show target"),
    ("env-<var>", f"show environment variable  [e.g.: {PSEUDO_FLAG_PREFIX}env-ld]"),
    ("env", "show all environment variables at once"),
    ("arch", "show target architecture"),
    ("static-runtime", "link runtime statically"),
    ("append-exe", "append .exe automatically to output filenames"),
    ("use-mingw-linker", "link with mingw"),
    ("no-intrin", "do not use clang intrinsics"),
    ("verbose", "enable verbose messages"),
)


@dataclass
class ArgumentContext:
    """
    What pass one needs to know about the resolved toolchain.

    Attributes:
        triple: Resolved target
        environment: Companion tool table for ``-wc-env``
        headers: Include directories (C++ ones may be added by ``-x c++``)
        discovery: Discovery bound to the triple
    """

    triple: TargetTriple
    environment: EnvironmentTable
    headers: HeaderSearchPaths
    discovery: HeaderDiscovery


def pseudo_flag_name(token: str) -> Optional[str]:
    """
    Name of a driver pseudo-flag, or None for any other token.

    Example:
        >>> pseudo_flag_name("--wc-target")
        'target'
        >>> pseudo_flag_name("-Wall") is None
        True
    """
    arg = token[1:] if token.startswith("--") else token
    if arg.startswith(PSEUDO_FLAG_PREFIX):
        return arg[len(PSEUDO_FLAG_PREFIX):]
    return None


def version_text() -> str:
    return "\n".join(
        (
            f"{PACKAGE_NAME}, Version: {__version__}",
            "Copyright (C) the wclang contributors",
            "License: GPL v2",
            "Bug reports, suggestions or contributions are welcome on the "
            "project's issue tracker",
        )
    )


def help_text() -> str:
    lines = [f"{PACKAGE_NAME}, Version: {__version__}"]
    for name, text in PSEUDO_FLAG_HELP:
        lines.append(f" {PSEUDO_FLAG_PREFIX}{name}: {text}")
    return "\n".join(lines)


# ============================================================================
# Pass 1
# ============================================================================


def classify_arguments(
    args: Sequence[str], state: CommandState, context: ArgumentContext
) -> None:
    """
    Sweep ``args`` once, updating ``state``.

    Args:
        args: Command line without the program name
        state: State to update
        context: Resolved toolchain information

    Raises:
        DriverExit: An introspection pseudo-flag printed its answer
        UsageError: Unknown pseudo-flag or malformed compiler flag
    """
    index = 0
    while index < len(args):
        token = args[index]
        index += 1

        if not token.startswith("-"):
            continue

        if token in COMPILE_ONLY_FLAGS:
            state.is_compile_step = True
            continue

        if token in ("-fexceptions", "-fno-exceptions") and state.is_cxx:
            state.exceptions = (
                ExceptionMode.ENABLED
                if token == "-fexceptions"
                else ExceptionMode.DISABLED
            )
            continue

        if token in SUBSYSTEM_FLAGS and state.subsystem is Subsystem.STANDARD:
            state.subsystem = SUBSYSTEM_FLAGS[token]
            continue

        if token.startswith("-o"):
            state.is_link_step = True
            continue

        if token.startswith("-x"):
            language = token[2:]
            if not language:
                if index >= len(args):
                    raise UsageError("missing argument for '-x'")
                language = args[index]
                index += 1
            _select_language(language, state, context)
            continue

        if token.startswith("-O"):
            state.optimization = OptimizationLevel.from_flag(token[2:])
            continue

        name = pseudo_flag_name(token)
        if name is not None:
            _handle_pseudo_flag(name, token, state, context)


def _select_language(language: str, state: CommandState, context: ArgumentContext):
    if language in C_LANGUAGES:
        state.is_cxx = False
    elif language in CXX_LANGUAGES:
        if not state.is_cxx:
            state.is_cxx = True
            if not context.discovery.add_cxx(context.headers, require=False):
                logger.warning(f"cannot find {context.triple} C++ headers")
    elif language not in NEUTRAL_LANGUAGES:
        raise UsageError(f"given language not supported: {language}")


def _handle_pseudo_flag(
    name: str, token: str, state: CommandState, context: ArgumentContext
) -> None:
    if name in ("version", "v"):
        raise DriverExit(0, version_text())

    if name in ("help", "h"):
        raise DriverExit(0, help_text())

    if name in ("target", "t"):
        raise DriverExit(0, context.triple.name)

    if name in ("arch", "a"):
        arch = context.triple.arch
        if arch is None:
            raise DriverExit(1, "internal error (could not determine arch)", "stderr")
        raise DriverExit(0, arch)

    if name in ("env", "e"):
        raise DriverExit(0, context.environment.render())

    if name.startswith(("env-", "e-")):
        tool = name.split("-", 1)[1].upper()
        value = context.environment.lookup(tool)
        if value is None:
            lines = [
                f"environment variable {tool} not found",
                "available environment variables: ",
            ]
            lines.extend(f" {var}" for var in COMPANION_TOOLS)
            raise DriverExit(1, "\n".join(lines), "stderr")
        raise DriverExit(0, value)

    if name == "static-runtime":
        state.deferred.append(DeferredAction(DeferredKind.STATIC_RUNTIME, token))
    elif name == "use-mingw-linker":
        state.deferred.append(DeferredAction(DeferredKind.USE_MINGW_LINKER, token))
    elif name == "append-exe":
        state.append_exe = True
    elif name == "no-intrin":
        state.no_intrinsics = True
    elif name == "verbose":
        state.verbose = True
    else:
        raise UnknownArgumentError(token)


# ============================================================================
# Normalisation and pass 2
# ============================================================================


def normalize_steps(state: CommandState) -> None:
    """
    Settle compile step versus link step.

    ``clang file.c -c -o file.o`` compiles only; ``clang file.c`` with no
    step flag at all compiles and links.
    """
    if state.is_compile_step and state.is_link_step:
        state.is_link_step = False
    elif not state.is_compile_step and not state.is_link_step:
        state.is_link_step = True


def apply_deferred(state: CommandState) -> None:
    """Apply every queued action now that the step classification is final."""
    for action in state.deferred:
        if not state.is_link_step:
            # avoid "argument unused during compilation"
            logger.debug(f"ignoring {action.token}")
            continue

        if action.kind is DeferredKind.STATIC_RUNTIME:
            if state.is_cxx:
                state.cxxflags.extend((STATIC_LIBGCC, STATIC_LIBSTDCXX))
            else:
                state.cflags.append(STATIC_LIBGCC)
        elif action.kind is DeferredKind.USE_MINGW_LINKER:
            state.subsystem = Subsystem.USE_MINGW_LINKER


def link_subsystem_flags(state: CommandState) -> List[str]:
    """Linker flags implied by the selected subsystem on a link step."""
    if not state.is_link_step:
        return []
    if state.subsystem in (Subsystem.CONSOLE, Subsystem.WINDOWS, Subsystem.DLL):
        return [f"-Wl,--subsystem,{state.subsystem.value}"]
    return []


__all__ = [
    "PSEUDO_FLAG_PREFIX",
    "ArgumentContext",
    "pseudo_flag_name",
    "classify_arguments",
    "normalize_steps",
    "apply_deferred",
    "link_subsystem_flags",
    "version_text",
    "help_text",
]
