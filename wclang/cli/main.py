"""
Command-line entry point.

The driver is installed under names such as ``w64-clang++`` or symlinked as
``x86_64-w64-mingw32-clang``; everything it needs to know about the target
comes from ``argv[0]``. Every other argument is for clang, except the
``-wc-`` pseudo-flags.
"""

import logging
import os
import sys
from typing import List, Mapping, Optional

from wclang.core.config import DriverSettings, load_driver_config
from wclang.core.exceptions import DriverExit, WclangError
from wclang.core.platform import PlatformInfo
from wclang.driver.arguments import (
    ArgumentContext,
    apply_deferred,
    classify_arguments,
    normalize_steps,
)
from wclang.driver.executor import CommandExecutor
from wclang.driver.state import CommandState
from wclang.driver.timing import TimingLog
from wclang.toolchain.environment import EnvironmentTable
from wclang.toolchain.identity import resolve_identity

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """
    Configure logging for a driver run.

    Args:
        verbose: Whether -wc-verbose was given
    """
    if verbose:
        level = logging.DEBUG
        format_str = "wclang: %(levelname)s [%(name)s] %(message)s"
    else:
        level = logging.WARNING
        format_str = "wclang: %(levelname)s: %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        force=True,  # Reconfigure once -wc-verbose is seen
    )


class DriverCLI:
    """
    One driver run from command line to process replacement.

    Args:
        environ: Environment to read settings from and pass on to the
            compiler (defaults to ``os.environ``)
        platform_info: Host platform (detected if None)
    """

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        platform_info: Optional[PlatformInfo] = None,
    ):
        self.environ = dict(os.environ if environ is None else environ)
        self.platform_info = platform_info

    def run(self, argv: List[str]) -> int:
        """
        Run the driver.

        Only returns on early exit or error; on success the process is
        replaced by the compiler.

        Args:
            argv: Full command line including the program name

        Returns:
            Exit code
        """
        configure_logging(verbose=False)

        try:
            self._run(argv)
        except DriverExit as e:
            if e.output:
                stream = sys.stderr if e.stream == "stderr" else sys.stdout
                print(e.output, file=stream)
            return e.exit_code
        except WclangError as e:
            logger.error(str(e))
            return 1
        return 0

    def _run(self, argv: List[str]) -> None:
        timing = TimingLog()
        timing.mark("start")

        program = argv[0] if argv else ""
        args = list(argv[1:])

        settings = DriverSettings.from_environ(self.environ)
        config = load_driver_config(settings.config_file)

        identity = resolve_identity(program, config, settings, self.platform_info)
        timing.mark("target resolved")

        state = CommandState(is_cxx=identity.is_cxx)
        state.cflags.extend(config.cflags)
        state.cxxflags.extend(config.cxxflags)

        context = ArgumentContext(
            triple=identity.triple,
            environment=EnvironmentTable.for_target(identity.triple),
            headers=identity.headers,
            discovery=identity.discovery,
        )
        classify_arguments(args, state, context)
        if state.verbose:
            configure_logging(verbose=True)
            if identity.headers.cxx_version is not None:
                logger.debug(f"detected libstdc++ version: {identity.headers.cxx_version}")

        normalize_steps(state)
        apply_deferred(state)
        timing.mark("arguments parsed")

        executor = CommandExecutor(identity, state, config, self.environ, self.platform_info)
        invocation = executor.prepare(args)
        timing.mark("command prepared")

        logger.debug(f"command in: {' '.join(argv)}")
        logger.debug(f"command out: {invocation.command_line()}")
        for line in timing.report():
            logger.debug(line)

        executor.execute(invocation)


def main(argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None) -> int:
    """Run the driver and return its exit code."""
    cli = DriverCLI(environ)
    return cli.run(sys.argv if argv is None else argv)


def run():
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
