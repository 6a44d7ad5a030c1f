"""
Driver configuration.

Two inputs feed a run:

* ``DriverConfig`` - the built-in search roots and extra flags, loaded from the
  bundled ``data/defaults.yaml`` and optionally overlaid by the YAML file named
  in ``WCLANG_CONFIG``.
* ``DriverSettings`` - the environment variables the driver reacts to, captured
  once from an explicit mapping.

Usage:
    import os
    from wclang.core.config import DriverSettings, load_driver_config

    settings = DriverSettings.from_environ(os.environ)
    config = load_driver_config(settings.config_file)
"""

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from wclang.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULTS_FILE = Path(__file__).parent.parent / "data" / "defaults.yaml"

MINGW_PATH_VAR = "MINGW_PATH"
NO_CRT_INLINE_WORKAROUND_VAR = "WCLANG_NO_CRT_INLINE_WORKAROUND"
NO_INTEGRATED_AS_VAR = "WCLANG_NO_INTEGRATED_AS"
FORCE_CXX_EXCEPTIONS_VAR = "WCLANG_FORCE_CXX_EXCEPTIONS"
CONFIG_FILE_VAR = "WCLANG_CONFIG"


def split_path_list(value: str) -> List[str]:
    """Split a colon separated path list, dropping empty entries."""
    return [entry for entry in value.split(":") if entry]


def env_flag_enabled(value: Optional[str]) -> bool:
    """
    Interpret an on/off environment variable.

    A variable is enabled when it is set, non-empty and does not start
    with '0'.
    """
    return bool(value) and not value.startswith("0")


@dataclass
class DriverConfig:
    """
    Built-in search roots and flags.

    Attributes:
        toolchain_root: Colon separated MinGW prefixes probed before the bases
        std_include_bases: Base directories probed for standard C headers
        cxx_include_bases: Base directories probed for libstdc++ headers
        cflags: Extra flags for C compilations
        cxxflags: Extra flags for C++ compilations
    """

    toolchain_root: str = ""
    std_include_bases: List[str] = field(default_factory=list)
    cxx_include_bases: List[str] = field(default_factory=list)
    cflags: List[str] = field(default_factory=list)
    cxxflags: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DriverConfig":
        """
        Build a config from a parsed YAML mapping.

        Raises:
            ConfigurationError: If a known key has the wrong type
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                logger.debug(f"Ignoring unknown configuration key: {key}")
                continue
            if key == "toolchain_root":
                if value is None:
                    value = ""
                if not isinstance(value, str):
                    raise ConfigurationError(f"'{key}' must be a string")
            else:
                if value is None:
                    value = []
                if not isinstance(value, list) or not all(
                    isinstance(item, str) for item in value
                ):
                    raise ConfigurationError(f"'{key}' must be a list of strings")
                value = list(value)
            values[key] = value
        return cls(**values)

    def merged_with(self, overlay: Dict[str, Any]) -> "DriverConfig":
        """Return a copy where every known key present in ``overlay`` replaces ours."""
        other = DriverConfig.from_dict(overlay)
        known = {f.name for f in fields(DriverConfig)}
        present = {k: getattr(other, k) for k in overlay if k in known}
        return replace(self, **present)


def load_yaml_config(config_file: Path, required: bool = False) -> Dict[str, Any]:
    """
    Load and parse a YAML configuration file.

    Args:
        config_file: Path to YAML configuration file
        required: If True, raise error if file doesn't exist

    Returns:
        Configuration dictionary (empty dict if file doesn't exist and not required)

    Raises:
        ConfigurationError: If the file is required but missing, or is not a
            valid YAML mapping
    """
    if not config_file.exists():
        if required:
            raise ConfigurationError(f"Configuration file not found: {config_file}")
        logger.debug(f"Config file not found (optional): {config_file}")
        return {}

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_file}: {e}") from e

    config = config or {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"Expected a mapping at the top of {config_file}")
    return config


def load_driver_config(overlay_file: Optional[Path] = None) -> DriverConfig:
    """
    Load the bundled defaults, then apply an optional user overlay.

    Args:
        overlay_file: YAML file whose keys replace the bundled values

    Returns:
        Resolved DriverConfig
    """
    config = DriverConfig.from_dict(load_yaml_config(DEFAULTS_FILE, required=True))
    if overlay_file is not None:
        config = config.merged_with(load_yaml_config(overlay_file, required=True))
    return config


@dataclass(frozen=True)
class DriverSettings:
    """
    Environment-driven switches for one run.

    Attributes:
        toolchain_root_override: MINGW_PATH value, or None when unset/empty
        crt_inline_workaround: Whether -D__CRT__NO_INLINE may be added
        no_integrated_as: Whether -no-integrated-as is added
        force_cxx_exceptions: Keep exceptions on despite version gating
        config_file: YAML overlay named by WCLANG_CONFIG
    """

    toolchain_root_override: Optional[str] = None
    crt_inline_workaround: bool = True
    no_integrated_as: bool = False
    force_cxx_exceptions: bool = False
    config_file: Optional[Path] = None

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> "DriverSettings":
        config_file = environ.get(CONFIG_FILE_VAR)
        return cls(
            toolchain_root_override=environ.get(MINGW_PATH_VAR) or None,
            crt_inline_workaround=not env_flag_enabled(
                environ.get(NO_CRT_INLINE_WORKAROUND_VAR)
            ),
            no_integrated_as=env_flag_enabled(environ.get(NO_INTEGRATED_AS_VAR)),
            force_cxx_exceptions=env_flag_enabled(
                environ.get(FORCE_CXX_EXCEPTIONS_VAR)
            ),
            config_file=Path(config_file) if config_file else None,
        )

    def without_override(self) -> "DriverSettings":
        """Copy of these settings with the toolchain-root override discarded."""
        return replace(self, toolchain_root_override=None)


__all__ = [
    "DriverConfig",
    "DriverSettings",
    "load_driver_config",
    "load_yaml_config",
    "split_path_list",
    "env_flag_enabled",
]
