"""
Invocation identity resolution.

The driver has no flags for choosing the target or the language: both come
from the name it was invoked under.

    x86_64-w64-mingw32-clang++   explicit triple, C++
    w32-clang                    any installed 32-bit triple, C
    w64-clang++                  any installed 64-bit triple, C++

A generic family name is resolved by probing the family's triples in order
and taking the first one whose C headers can be found.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from wclang.core.config import DriverConfig, DriverSettings
from wclang.core.exceptions import (
    DiscoveryError,
    InvocationNameError,
    TargetNotFoundError,
)
from wclang.core.platform import PlatformInfo
from wclang.toolchain.headers import HeaderDiscovery, HeaderSearchPaths
from wclang.toolchain.targets import (
    TargetTriple,
    family_triples,
    match_family_marker,
    match_triple,
)

logger = logging.getLogger(__name__)

LANGUAGE_MARKER = "clang"
CXX_SUFFIX = "++"


@dataclass(frozen=True)
class InvocationName:
    """
    Parsed program name.

    Attributes:
        name: Basename the driver was invoked under
        prefix: Everything before the final '-clang' component
        is_cxx: Whether the C++ variant ('clang++') was requested
    """

    name: str
    prefix: str
    is_cxx: bool


@dataclass
class Identity:
    """
    Resolved target and language for one run.

    Attributes:
        triple: Target triple
        is_cxx: Language variant from the invocation name
        headers: Standard C (and, when found, C++) include directories
        discovery: Discovery object bound to the triple, for later probes
        settings: Settings the resolution succeeded with (the toolchain-root
            override is cleared if it had to be discarded)
    """

    triple: TargetTriple
    is_cxx: bool
    headers: HeaderSearchPaths
    discovery: HeaderDiscovery
    settings: DriverSettings


def parse_invocation_name(program: str) -> InvocationName:
    """
    Split a program path into target prefix and language variant.

    Raises:
        InvocationNameError: If the name does not end in '-clang' or '-clang++'
    """
    name = os.path.basename(program)
    prefix, sep, tail = name.rpartition("-")

    if not sep or not tail.startswith(LANGUAGE_MARKER):
        raise InvocationNameError(
            "invalid invocation name: clang should be followed "
            "after target (e.g.: w32-clang)"
        )

    suffix = tail[len(LANGUAGE_MARKER):]
    if suffix not in ("", CXX_SUFFIX):
        raise InvocationNameError(
            "invalid invocation name: ++ (or nothing) should be "
            "followed after clang (e.g.: w32-clang++)"
        )

    return InvocationName(name=name, prefix=prefix, is_cxx=suffix == CXX_SUFFIX)


class IdentityResolver:
    """
    Resolve an invocation name to a target triple with its headers.

    Args:
        config: Built-in search roots
        settings: Environment switches (may carry a toolchain-root override)
        platform_info: Host platform passed on to header discovery
    """

    def __init__(
        self,
        config: DriverConfig,
        settings: DriverSettings,
        platform_info: Optional[PlatformInfo] = None,
    ):
        self.config = config
        self.settings = settings
        self.platform_info = platform_info

    def _discovery(self, target: str, settings: DriverSettings) -> HeaderDiscovery:
        return HeaderDiscovery(target, self.config, settings, self.platform_info)

    def resolve(self, program: str) -> Identity:
        """
        Resolve ``program`` into an :class:`Identity`.

        If discovery fails while a toolchain-root override is set, the
        override is discarded as a whole and resolution runs once more
        against the built-in roots.

        Raises:
            InvocationNameError: Malformed name or unknown target prefix
            DiscoveryError: No matching installation or headers
        """
        invocation = parse_invocation_name(program)

        try:
            return self._resolve_once(invocation, self.settings)
        except DiscoveryError:
            if not self.settings.toolchain_root_override:
                raise
            logger.warning(
                "MINGW_PATH env variable does not point to any "
                "valid mingw installation for the current target!"
            )
            return self._resolve_once(invocation, self.settings.without_override())

    def _resolve_once(
        self, invocation: InvocationName, settings: DriverSettings
    ) -> Identity:
        triple = match_triple(invocation.prefix)

        if triple is not None:
            discovery = self._discovery(triple.name, settings)
            headers = discovery.discover(require_cxx=invocation.is_cxx)
            return Identity(triple, invocation.is_cxx, headers, discovery, settings)

        family = match_family_marker(invocation.prefix)
        if family is None:
            raise InvocationNameError(f"invalid target: {invocation.name}")

        for name in family_triples(family):
            discovery = self._discovery(name, settings)
            std = discovery.find_std()
            if not std:
                continue
            logger.debug(f"Resolved {invocation.prefix} to {name}")
            headers = HeaderSearchPaths(std=list(std.paths))
            discovery.add_cxx(headers, require=invocation.is_cxx)
            triple = TargetTriple(name, family)
            return Identity(triple, invocation.is_cxx, headers, discovery, settings)

        raise TargetNotFoundError(family.description)


def resolve_identity(
    program: str,
    config: DriverConfig,
    settings: DriverSettings,
    platform_info: Optional[PlatformInfo] = None,
) -> Identity:
    """Convenience wrapper around :meth:`IdentityResolver.resolve`."""
    return IdentityResolver(config, settings, platform_info).resolve(program)


__all__ = [
    "InvocationName",
    "Identity",
    "IdentityResolver",
    "parse_invocation_name",
    "resolve_identity",
]
