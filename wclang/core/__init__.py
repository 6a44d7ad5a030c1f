"""
Core infrastructure for wclang: configuration, errors and host detection.
"""

from wclang.core.config import DriverConfig, DriverSettings, load_driver_config
from wclang.core.exceptions import (
    WclangError,
    ConfigurationError,
    UsageError,
    InvocationNameError,
    UnknownArgumentError,
    DiscoveryError,
    TargetNotFoundError,
    HeadersNotFoundError,
    ExecutableNotFoundError,
    CompilerLaunchError,
    DriverExit,
)
from wclang.core.platform import PlatformInfo, detect_platform

__all__ = [
    "DriverConfig",
    "DriverSettings",
    "load_driver_config",
    "WclangError",
    "ConfigurationError",
    "UsageError",
    "InvocationNameError",
    "UnknownArgumentError",
    "DiscoveryError",
    "TargetNotFoundError",
    "HeadersNotFoundError",
    "ExecutableNotFoundError",
    "CompilerLaunchError",
    "DriverExit",
    "PlatformInfo",
    "detect_platform",
]
