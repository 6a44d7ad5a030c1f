"""
Toolchain resolution for wclang.

Target triples, versioned directory discovery, header search paths and
the companion tool environment of a MinGW cross toolchain.
"""

from wclang.toolchain.version import CompilerVersion, highest_version
from wclang.toolchain.targets import (
    TargetFamily,
    TargetTriple,
    match_triple,
    match_family_marker,
)
from wclang.toolchain.headers import HeaderDiscovery, HeaderSearchPaths, ProbeResult
from wclang.toolchain.identity import Identity, IdentityResolver, resolve_identity
from wclang.toolchain.environment import COMPANION_TOOLS, EnvironmentTable

__all__ = [
    "CompilerVersion",
    "highest_version",
    "TargetFamily",
    "TargetTriple",
    "match_triple",
    "match_family_marker",
    "HeaderDiscovery",
    "HeaderSearchPaths",
    "ProbeResult",
    "Identity",
    "IdentityResolver",
    "resolve_identity",
    "COMPANION_TOOLS",
    "EnvironmentTable",
]
