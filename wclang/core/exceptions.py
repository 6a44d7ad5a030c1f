"""
Centralized exception hierarchy for wclang.

Library code raises these; only the command-line entry point turns them
into messages on stderr and a process exit code.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class WclangError(Exception):
    """Base exception for all wclang errors."""

    pass


class ConfigurationError(WclangError):
    """Raised when the driver configuration cannot be loaded."""

    pass


# ============================================================================
# Usage Exceptions
# ============================================================================


class UsageError(WclangError):
    """Base exception for malformed command lines and invocation names."""

    pass


class InvocationNameError(UsageError):
    """Raised when the program name does not follow the <target>-clang[++] contract."""

    pass


class UnknownArgumentError(UsageError):
    """Raised for a token under the driver's pseudo-flag prefix that is not known."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"invalid argument: {token}")


# ============================================================================
# Discovery Exceptions
# ============================================================================


class DiscoveryError(WclangError):
    """Base exception when part of the cross toolchain cannot be located."""

    pass


class TargetNotFoundError(DiscoveryError):
    """Raised when no installed target triple matches the requested family."""

    def __init__(self, family_description: str):
        self.family_description = family_description
        desc = f"mingw-w64 ({family_description})"
        super().__init__(
            f"cannot find {desc} installation\n"
            f"make sure {desc} is installed on your system\n"
            f"if you have moved your mingw installation, "
            f"then re-run the installation process"
        )


class HeadersNotFoundError(DiscoveryError):
    """Raised when C or C++ headers for a resolved target cannot be found."""

    def __init__(self, target: str, kind: str):
        self.target = target
        self.kind = kind
        super().__init__(
            f"cannot find {target} {kind} headers\n"
            f"make sure {target} {kind} headers are installed on your system"
        )


class ExecutableNotFoundError(DiscoveryError):
    """Raised when a required executable is not on the search path."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"cannot find '{name}' executable")


# ============================================================================
# Execution Exceptions
# ============================================================================


class CompilerLaunchError(WclangError):
    """Raised when replacing the process with the real compiler fails."""

    def __init__(self, compiler: str, cause: OSError):
        self.compiler = compiler
        self.cause = cause
        if isinstance(cause, FileNotFoundError):
            msg = f"invoking compiler failed\n{compiler} not installed?"
        else:
            msg = f"invoking compiler failed: {compiler}: {cause.strerror or cause}"
        super().__init__(msg)


class DriverExit(WclangError):
    """
    Raised by introspection pseudo-flags to stop the run early.

    Attributes:
        exit_code: Process exit code to use
        output: Text to print before exiting
        stream: 'stdout' or 'stderr'
    """

    def __init__(self, exit_code: int, output: str = "", stream: str = "stdout"):
        self.exit_code = exit_code
        self.output = output
        self.stream = stream
        super().__init__(output)
