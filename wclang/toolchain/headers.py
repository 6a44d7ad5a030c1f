"""
toolchain/headers.py

Header directory discovery for MinGW cross toolchains.

Three independent searches feed the final ``-isystem`` list:

- standard C headers (mingw-w64 CRT, marker ``stdlib.h``)
- C++ headers (libstdc++, marker ``iostream``)
- compiler intrinsic headers (clang resource dir, marker ``xmmintrin.h``)

Distributions have installed these in many different places over the years.
Every known layout is an isolated probe returning a :class:`ProbeResult`;
probes are composed into ordered chains that stop at the first success.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple

from wclang.core.config import DriverConfig, DriverSettings, split_path_list
from wclang.core.exceptions import HeadersNotFoundError
from wclang.core.platform import PlatformInfo, detect_platform
from wclang.toolchain.version import CompilerVersion, highest_version

logger = logging.getLogger(__name__)

STD_MARKER = "stdlib.h"
CXX_MARKER = "iostream"
INTRINSIC_MARKER = "xmmintrin.h"

SYSTEM_INCLUDE_FLAG = "-isystem"

# Absolute clang resource directories shipped by Apple developer tools
MACOS_INTRINSIC_DIRS = (
    "/Library/Developer/CommandLineTools/usr/lib/clang",
    "/Applications/Contents/Developer/Toolchains/XcodeDefault.xctoolchain/usr/lib/clang",
)


@dataclass
class HeaderSearchPaths:
    """
    Include directories found for one run.

    The three lists only ever grow. They are emitted intrinsic first, then
    C++, then standard C: libstdc++ needs its own directories ahead of the
    C headers or ``#include_next <stdlib.h>`` breaks.

    Attributes:
        intrinsic: Compiler intrinsic header directories
        cxx: libstdc++ header directories
        std: Standard C header directories
        cxx_version: libstdc++ version directory picked during C++ discovery
        clang_version: clang version of the intrinsic directory picked
    """

    intrinsic: List[str] = field(default_factory=list)
    cxx: List[str] = field(default_factory=list)
    std: List[str] = field(default_factory=list)
    cxx_version: Optional[CompilerVersion] = None
    clang_version: CompilerVersion = field(default_factory=CompilerVersion)

    def ordered(self, include_intrinsics: bool = True) -> List[str]:
        """All directories in emission order."""
        intrinsic = self.intrinsic if include_intrinsics else []
        return [*intrinsic, *self.cxx, *self.std]

    def include_arguments(self, include_intrinsics: bool = True) -> List[str]:
        """``-isystem <dir>`` pairs in emission order."""
        args = []
        for directory in self.ordered(include_intrinsics):
            args.extend((SYSTEM_INCLUDE_FLAG, directory))
        return args


@dataclass(frozen=True)
class ProbeResult:
    """
    Outcome of one layout probe or probe chain.

    Attributes:
        found: Whether the layout matched
        paths: Directories to register, in order
        version: Version directory the match came from, if any
        layout: Short name of the matching layout (for verbose output)
    """

    found: bool
    paths: Tuple[str, ...] = ()
    version: Optional[CompilerVersion] = None
    layout: str = ""

    @classmethod
    def miss(cls) -> "ProbeResult":
        return cls(found=False)

    @classmethod
    def hit(
        cls, layout: str, *paths: Path, version: Optional[CompilerVersion] = None
    ) -> "ProbeResult":
        return cls(
            found=True,
            paths=tuple(str(p) for p in paths),
            version=version,
            layout=layout,
        )

    def __bool__(self) -> bool:
        return self.found


Probe = Callable[[], ProbeResult]


def first_match(probes: Iterable[Probe]) -> ProbeResult:
    """Run ``probes`` in order and return the first successful result."""
    for probe in probes:
        result = probe()
        if result.found:
            return result
    return ProbeResult.miss()


def _contains(directory: Path, name: str) -> bool:
    return (directory / name).exists()


def _has_child(name: str) -> Callable[[Path, str], bool]:
    """Version-directory filter: keep entries that contain ``name``."""

    def check(parent: Path, entry: str) -> bool:
        return (parent / entry / name).exists()

    return check


def strip_bin_suffix(entry: str) -> str:
    """Turn a PATH-style entry ('/opt/mingw/bin') into its prefix ('/opt/mingw')."""
    trimmed = entry.rstrip("/")
    if trimmed.endswith("/bin"):
        return trimmed[: -len("/bin")] or "/"
    return entry


# ============================================================================
# Standard C headers
# ============================================================================


def probe_std_prefix(root: str, target: str) -> ProbeResult:
    """<root>/<target>/include (mingw-w64 default prefix layout)."""
    directory = Path(root) / target / "include"
    if directory.is_dir() and _contains(directory, STD_MARKER):
        return ProbeResult.hit("prefix", directory)
    return ProbeResult.miss()


def probe_std_sysroot(root: str, target: str) -> ProbeResult:
    """<root>/<target>/sys-root/mingw/include (Fedora/openSUSE)."""
    directory = Path(root) / target / "sys-root" / "mingw" / "include"
    if directory.is_dir() and _contains(directory, STD_MARKER):
        return ProbeResult.hit("sys-root", directory)
    return ProbeResult.miss()


def probe_std_mxe(root: str, target: str) -> ProbeResult:
    """<root>/usr/<target>/include (MXE)."""
    directory = Path(root) / "usr" / target / "include"
    if directory.is_dir() and _contains(directory, STD_MARKER):
        return ProbeResult.hit("mxe", directory)
    return ProbeResult.miss()


STD_LAYOUT_PROBES = (probe_std_prefix, probe_std_sysroot, probe_std_mxe)


def probe_std_root(root: str, target: str) -> ProbeResult:
    """Try every standard C layout below one root."""
    return first_match(lambda p=p: p(root, target) for p in STD_LAYOUT_PROBES)


# ============================================================================
# C++ headers
# ============================================================================


def _cxx_with_target(directory: Path, target: str, layout: str, version=None):
    return ProbeResult.hit(layout, directory, directory / target, version=version)


def probe_cxx_flat(std_dir: str, target: str) -> ProbeResult:
    """<std>/c++ holding the headers directly."""
    directory = Path(std_dir) / "c++"
    if _contains(directory, CXX_MARKER):
        return _cxx_with_target(directory, target, "std-flat")
    return ProbeResult.miss()


def probe_cxx_versioned(std_dir: str, target: str) -> ProbeResult:
    """<std>/c++/<version>."""
    base = Path(std_dir) / "c++"
    version = highest_version(base)
    if version is None:
        return ProbeResult.miss()
    directory = base / version.text
    if _contains(directory, CXX_MARKER):
        return _cxx_with_target(directory, target, "std-versioned", version)
    return ProbeResult.miss()


def probe_cxx_base_versioned(base: str, target: str) -> ProbeResult:
    """<base>/<version> where the version directory has a <target> child."""
    version = highest_version(base, _has_child(target))
    if version is None:
        return ProbeResult.miss()
    directory = Path(base) / version.text
    if _contains(directory, CXX_MARKER):
        return _cxx_with_target(directory, target, "base-versioned", version)
    return ProbeResult.miss()


def probe_cxx_gcc_libdir(base: str, target: str) -> ProbeResult:
    """
    <base>/<target>/<version>/include/c++ plus <base>/<target>/<version>.

    The two directories are registered side by side, not nested.
    """
    target_dir = Path(base) / target
    version = highest_version(target_dir, _has_child(target))
    if version is None:
        return ProbeResult.miss()
    version_dir = target_dir / version.text
    directory = version_dir / "include" / "c++"
    if _contains(directory, CXX_MARKER):
        return ProbeResult.hit("gcc-libdir", directory, version_dir, version=version)
    return ProbeResult.miss()


def probe_cxx_gcc_include(base: str, target: str) -> ProbeResult:
    """<base>/<target>/<version>/include/c++ that itself has a <target> child."""
    target_dir = Path(base) / target
    version = highest_version(target_dir)
    if version is None:
        return ProbeResult.miss()
    directory = target_dir / version.text / "include" / "c++"
    if not _contains(directory, target):
        return ProbeResult.miss()
    if _contains(directory, CXX_MARKER):
        return _cxx_with_target(directory, target, "gcc-include", version)
    return ProbeResult.miss()


CXX_STD_PROBES = (probe_cxx_flat, probe_cxx_versioned)
CXX_BASE_PROBES = (probe_cxx_base_versioned, probe_cxx_gcc_libdir, probe_cxx_gcc_include)


# ============================================================================
# Compiler intrinsics
# ============================================================================


def intrinsic_candidates(
    compiler_bindir: str, platform_info: Optional[PlatformInfo] = None
) -> List[str]:
    """
    Directories expected to hold version-named clang resource directories.

    Args:
        compiler_bindir: Real directory of the clang executable
        platform_info: Host platform; detected if None

    Returns:
        Candidate directories in priority order
    """
    info = platform_info or detect_platform()
    bindir = Path(compiler_bindir)
    candidates = []

    if info.os == "cygwin":
        candidates.append(
            bindir / ".." / "lib" / "clang" / f"{info.machine_triple_arch()}-pc-cygwin"
        )

    candidates.append(bindir / ".." / "lib" / "clang")

    if info.os == "linux":
        # openSUSE and friends keep 64-bit libraries in lib64
        if info.arch == "x64":
            candidates.append(bindir / ".." / "lib64" / "clang")
        elif info.arch == "x86":
            candidates.append(bindir / ".." / "lib32" / "clang")

    if info.os == "macos":
        candidates.extend(Path(d) for d in MACOS_INTRINSIC_DIRS)

    candidates.append(bindir / ".." / "include" / "clang")
    candidates.append(Path("/usr/include/clang"))

    return [os.path.normpath(str(c)) for c in candidates]


def probe_intrinsic_dir(candidate: str) -> ProbeResult:
    """
    Pick the newest <candidate>/<version>[/include] holding the marker header.

    Every version directory is inspected; ``<version>/include`` is preferred
    over ``<version>`` itself.
    """
    base = Path(candidate)
    try:
        names = sorted(entry.name for entry in base.iterdir())
    except OSError:
        return ProbeResult.miss()

    best_version = CompilerVersion()
    best_dir = None

    for name in names:
        if name.startswith(".") or not (base / name).is_dir():
            continue
        version = CompilerVersion.parse(name)
        if not version.is_set:
            continue
        for directory in (base / name / "include", base / name):
            if _contains(directory, INTRINSIC_MARKER):
                if version > best_version:
                    best_version = version
                    best_dir = directory
                break

    if best_dir is None:
        return ProbeResult.miss()
    return ProbeResult.hit("intrinsics", best_dir, version=best_version)


# ============================================================================
# Discovery front-end
# ============================================================================


class HeaderDiscovery:
    """
    Run the header probe chains for one target.

    Example:
        >>> discovery = HeaderDiscovery("x86_64-w64-mingw32", config, settings)
        >>> std = discovery.find_std()
        >>> if std:
        ...     cxx = discovery.find_cxx(list(std.paths))
    """

    def __init__(
        self,
        target: str,
        config: DriverConfig,
        settings: DriverSettings,
        platform_info: Optional[PlatformInfo] = None,
    ):
        self.target = target
        self.config = config
        self.settings = settings
        self.platform_info = platform_info

    def search_roots(self) -> List[str]:
        """
        Roots probed for standard C headers, in priority order.

        An override from the environment is used exclusively. Without one,
        the configured toolchain root comes first, then the base directories.
        """
        if self.settings.toolchain_root_override:
            entries = split_path_list(self.settings.toolchain_root_override)
            return [strip_bin_suffix(e) for e in entries]

        roots = [strip_bin_suffix(e) for e in split_path_list(self.config.toolchain_root)]
        roots.extend(self.config.std_include_bases)
        return roots

    def find_std(self) -> ProbeResult:
        """Locate the standard C header directory."""
        roots = self.search_roots()
        result = first_match(lambda r=r: probe_std_root(r, self.target) for r in roots)
        if result:
            logger.debug(f"Found C include dir for {self.target}: {result.paths[0]}")
        else:
            logger.debug(f"No C headers for {self.target} below {roots}")
        return result

    def cxx_base_roots(self, std_paths: List[str]) -> List[str]:
        """
        Prefixes prepended to the configured C++ base directories.

        The installation prefix derived from the first C header directory
        (``<prefix>/<target>/include``) comes first, then the filesystem root.
        """
        roots = []
        if std_paths:
            roots.append(os.path.normpath(os.path.join(std_paths[0], "..", "..", "..")))
        roots.append("/")
        unique = []
        for root in roots:
            if root not in unique:
                unique.append(root)
        return unique

    def find_cxx(self, std_paths: List[str]) -> ProbeResult:
        """Locate libstdc++ headers, given the standard C directories found."""

        def probes():
            for std_dir in std_paths:
                for probe in CXX_STD_PROBES:
                    yield lambda probe=probe, std_dir=std_dir: probe(std_dir, self.target)

            for root in self.cxx_base_roots(std_paths):
                for probe in CXX_BASE_PROBES:
                    for base in self.config.cxx_include_bases:
                        base_dir = os.path.join(root, base.lstrip("/"))
                        yield lambda probe=probe, base_dir=base_dir: probe(
                            base_dir, self.target
                        )

        result = first_match(probes())
        if result:
            logger.debug(
                f"Found C++ include dirs ({result.layout}) for {self.target}: "
                f"{', '.join(result.paths)}"
            )
        return result

    def find_intrinsics(self, compiler_bindir: str) -> ProbeResult:
        """Locate the clang intrinsic headers relative to the compiler."""
        candidates = intrinsic_candidates(compiler_bindir, self.platform_info)
        result = first_match(lambda c=c: probe_intrinsic_dir(c) for c in candidates)
        if result:
            logger.debug(
                f"Found intrinsic headers for clang {result.version}: {result.paths[0]}"
            )
        return result

    def discover(self, require_cxx: bool) -> HeaderSearchPaths:
        """
        Run standard C and C++ discovery.

        Raises:
            HeadersNotFoundError: If C headers are missing, or C++ headers are
                missing and ``require_cxx`` is set
        """
        paths = HeaderSearchPaths()
        std = self.find_std()
        if not std:
            raise HeadersNotFoundError(self.target, "C")
        paths.std.extend(std.paths)
        self.add_cxx(paths, require=require_cxx)
        return paths

    def add_cxx(self, paths: HeaderSearchPaths, require: bool) -> bool:
        """
        Append C++ directories to ``paths`` unless already present.

        Returns:
            True if C++ headers are available afterwards
        """
        if paths.cxx:
            return True
        cxx = self.find_cxx(paths.std)
        if not cxx:
            if require:
                raise HeadersNotFoundError(self.target, "C++")
            return False
        paths.cxx.extend(cxx.paths)
        paths.cxx_version = cxx.version
        return True


__all__ = [
    "HeaderSearchPaths",
    "ProbeResult",
    "HeaderDiscovery",
    "first_match",
    "strip_bin_suffix",
    "probe_std_prefix",
    "probe_std_sysroot",
    "probe_std_mxe",
    "probe_std_root",
    "probe_cxx_flat",
    "probe_cxx_versioned",
    "probe_cxx_base_versioned",
    "probe_cxx_gcc_libdir",
    "probe_cxx_gcc_include",
    "intrinsic_candidates",
    "probe_intrinsic_dir",
]
