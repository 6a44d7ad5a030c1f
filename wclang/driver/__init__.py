"""
Command-line processing for one driver run.

Pass one classifies the arguments, pass two applies deferred pseudo-flags,
pass three builds the final compiler command, and the executor launches it.
"""

from wclang.driver.state import (
    CommandState,
    DeferredAction,
    DeferredKind,
    ExceptionMode,
    OptimizationLevel,
    Subsystem,
)
from wclang.driver.arguments import (
    ArgumentContext,
    apply_deferred,
    classify_arguments,
    normalize_steps,
)
from wclang.driver.emission import build_arguments
from wclang.driver.executor import CommandExecutor, CompilerInvocation
from wclang.driver.timing import TimingLog

__all__ = [
    "CommandState",
    "DeferredAction",
    "DeferredKind",
    "ExceptionMode",
    "OptimizationLevel",
    "Subsystem",
    "ArgumentContext",
    "apply_deferred",
    "classify_arguments",
    "normalize_steps",
    "build_arguments",
    "CommandExecutor",
    "CompilerInvocation",
    "TimingLog",
]
