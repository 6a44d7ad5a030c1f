"""
Compiler resolution and process replacement.

The executor turns a resolved identity plus the classified command state
into a concrete :class:`CompilerInvocation` (executable, argument vector and
environment), then replaces the current process with it.
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, NoReturn, Optional, Sequence

from wclang.core.config import MINGW_PATH_VAR, DriverConfig
from wclang.core.exceptions import CompilerLaunchError
from wclang.core.platform import PlatformInfo
from wclang.driver.arguments import link_subsystem_flags
from wclang.driver.emission import build_arguments
from wclang.driver.state import CommandState, Subsystem
from wclang.toolchain.environment import EnvironmentTable
from wclang.toolchain.executables import (
    command_directory,
    prepend_search_path,
    resolve_command,
)
from wclang.toolchain.identity import Identity

logger = logging.getLogger(__name__)

LIBGCC_QUERY_FLAG = "-print-libgcc-file-name"
CRT_NO_INLINE_FLAG = "-D__CRT__NO_INLINE"


@dataclass
class CompilerInvocation:
    """
    Fully prepared compiler launch.

    Attributes:
        executable: Absolute path of the program to exec
        arguments: Argument vector, executable first
        environment: Environment for the new process image
    """

    executable: str
    arguments: List[str]
    environment: Dict[str, str]

    def command_line(self) -> str:
        return " ".join(self.arguments)


def compiler_name(is_cxx: bool) -> str:
    return "clang++" if is_cxx else "clang"


def helper_name(identity: Identity, is_cxx: bool) -> str:
    """MinGW gcc driver for the target (``<triple>-gcc`` / ``<triple>-g++``)."""
    return identity.triple.tool_name("g++" if is_cxx else "gcc")


def query_libgcc_dir(gcc: str, environment: Mapping[str, str]) -> Optional[str]:
    """
    Ask the target's gcc where libgcc lives.

    Args:
        gcc: Name or path of the target gcc
        environment: Environment to run it with (its PATH is searched)

    Returns:
        Directory holding libgcc, or None if the query failed
    """
    try:
        result = subprocess.run(
            [gcc, LIBGCC_QUERY_FLAG],
            capture_output=True,
            text=True,
            env=dict(environment),
            check=False,
        )
    except OSError as e:
        logger.warning(f"cannot run {gcc} {LIBGCC_QUERY_FLAG}: {e}")
        return None

    output = result.stdout.strip()
    if result.returncode != 0 or not output:
        logger.warning(
            f"{gcc} {LIBGCC_QUERY_FLAG} returned {result.returncode}, "
            f"not adding the libgcc directory"
        )
        return None
    return os.path.dirname(output)


class CommandExecutor:
    """
    Prepare and launch the real compiler for one run.

    Args:
        identity: Resolved target, language and headers
        state: Command state after passes one and two
        config: Driver configuration (for the toolchain root)
        environ: Environment the driver was started with
        platform_info: Host platform for intrinsic discovery

    Example:
        >>> executor = CommandExecutor(identity, state, config, os.environ)
        >>> invocation = executor.prepare(argv[1:])
        >>> executor.execute(invocation)
    """

    def __init__(
        self,
        identity: Identity,
        state: CommandState,
        config: DriverConfig,
        environ: Mapping[str, str],
        platform_info: Optional[PlatformInfo] = None,
    ):
        self.identity = identity
        self.state = state
        self.config = config
        self.environ = environ
        self.platform_info = platform_info

    @property
    def settings(self):
        return self.identity.settings

    def toolchain_root(self) -> str:
        """Toolchain root put in front of PATH (override first, then config)."""
        return self.settings.toolchain_root_override or self.config.toolchain_root

    def child_environment(self) -> Dict[str, str]:
        """
        Environment for the compiler process.

        The companion tool table is exported, the toolchain root goes in
        front of PATH, and a discarded MINGW_PATH override is removed.
        """
        env = dict(self.environ)

        if MINGW_PATH_VAR in env and not self.settings.toolchain_root_override:
            del env[MINGW_PATH_VAR]

        root = self.toolchain_root()
        if root:
            env["PATH"] = prepend_search_path(root, env.get("PATH"))

        env.update(EnvironmentTable.for_target(self.identity.triple).as_dict())
        return env

    def _apply_link_mode(self) -> str:
        """Linker flags for the subsystem; returns the compiler to run."""
        state = self.state
        if state.is_link_step and state.subsystem is Subsystem.USE_MINGW_LINKER:
            return helper_name(self.identity, state.is_cxx)
        state.linker_flags.extend(link_subsystem_flags(state))
        return compiler_name(self.identity.is_cxx)

    def _apply_crt_workaround(self) -> None:
        # mingw-w64 inline CRT functions miscompile under optimisation on 64-bit
        state = self.state
        if (
            self.identity.triple.is_64bit
            and state.optimization.is_optimizing
            and self.settings.crt_inline_workaround
        ):
            state.language_flags.append(CRT_NO_INLINE_FLAG)

    def _apply_intrinsics(self, compiler_bindir: Path) -> None:
        headers = self.identity.headers
        result = self.identity.discovery.find_intrinsics(str(compiler_bindir))
        if result:
            headers.intrinsic.extend(p for p in result.paths if p not in headers.intrinsic)
            headers.clang_version = result.version
            logger.debug(f"detected clang version: {result.version}")
        elif not self.state.no_intrinsics:
            logger.warning("cannot find clang intrinsics directory")

    def prepare(self, args: Sequence[str]) -> CompilerInvocation:
        """
        Build the invocation for ``args`` (the command line without argv[0]).

        Raises:
            ExecutableNotFoundError: If the compiler or the MinGW gcc driver
                cannot be found
        """
        state = self.state
        env = self.child_environment()

        compiler = self._apply_link_mode()
        self._apply_crt_workaround()

        executable = resolve_command(compiler, env.get("PATH"))
        logger.debug(f"Using compiler {executable}")

        helper = helper_name(self.identity, state.is_cxx)
        helper_dir = command_directory(helper, env.get("PATH"))

        if state.is_link_step:
            if state.subsystem is Subsystem.USE_MINGW_LINKER:
                env["PATH"] = prepend_search_path(str(helper_dir), env.get("PATH"))
            libgcc_dir = query_libgcc_dir(
                self.identity.triple.tool_name("gcc"), env
            )
            if libgcc_dir:
                state.linker_flags.append(f"-L{libgcc_dir}")

        if not state.is_passthrough_link:
            self._apply_intrinsics(executable.parent)

        arguments = build_arguments(
            str(executable),
            args,
            state,
            self.identity.triple,
            self.identity.headers,
            self.settings,
        )
        return CompilerInvocation(str(executable), arguments, env)

    def execute(self, invocation: CompilerInvocation) -> NoReturn:
        """
        Replace the current process with ``invocation``.

        Raises:
            CompilerLaunchError: If the exec itself fails
        """
        try:
            os.execve(invocation.executable, invocation.arguments, invocation.environment)
        except OSError as e:
            raise CompilerLaunchError(invocation.executable, e) from e


__all__ = [
    "CompilerInvocation",
    "CommandExecutor",
    "compiler_name",
    "helper_name",
    "query_libgcc_dir",
]
