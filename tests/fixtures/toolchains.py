"""Reusable toolchain fixtures for testing.

This module provides pytest fixtures that create fake MinGW-w64 and clang
installations below ``tmp_path``. Headers are empty marker files and
executables are small shell scripts, so no real cross toolchain is needed.

Layout created by ``mingw_root``::

    <root>/usr/bin/<triple>-gcc, <triple>-g++
    <root>/usr/<triple>/include/stdlib.h
    <root>/usr/lib/gcc/<triple>/10-posix/include/c++/iostream
    <root>/usr/lib/gcc/<triple>/10-posix/include/c++/<triple>/
"""

import os
from pathlib import Path
from typing import Iterable

import pytest

from wclang.core.config import DriverConfig, DriverSettings
from wclang.core.platform import PlatformInfo

MINGW_TRIPLES = ("x86_64-w64-mingw32", "i686-w64-mingw32")
GCC_VERSION_DIR = "10-posix"
CLANG_VERSION_DIR = "15.0.7"


def touch(path: Path, content: str = "") -> Path:
    """Create ``path`` and its parents."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def make_executable(path: Path, output: str = "") -> Path:
    """Create an executable shell script that prints ``output``."""
    touch(path, f"#!/bin/sh\necho '{output}'\n")
    path.chmod(0o755)
    return path


def build_mingw_tree(
    root: Path, triples: Iterable[str] = MINGW_TRIPLES, with_cxx: bool = True
) -> Path:
    """
    Create a Debian style MinGW installation below ``root``.

    Args:
        root: Directory standing in for the filesystem root
        triples: Triples to install
        with_cxx: Whether libstdc++ headers are installed

    Returns:
        ``root``
    """
    usr = root / "usr"
    for triple in triples:
        touch(usr / triple / "include" / "stdlib.h")
        make_executable(usr / "bin" / f"{triple}-gcc")
        make_executable(usr / "bin" / f"{triple}-g++")
        if with_cxx:
            cxx = usr / "lib" / "gcc" / triple / GCC_VERSION_DIR / "include" / "c++"
            touch(cxx / "iostream")
            (cxx / triple).mkdir(parents=True, exist_ok=True)
    return root


def build_clang_tree(root: Path, version: str = CLANG_VERSION_DIR) -> Path:
    """
    Create a clang installation with its resource headers.

    Returns:
        The ``bin`` directory holding clang and clang++
    """
    bindir = root / "bin"
    make_executable(bindir / "clang")
    make_executable(bindir / "clang++")
    touch(root / "lib" / "clang" / version / "include" / "xmmintrin.h")
    return bindir


@pytest.fixture
def mingw_root(tmp_path) -> Path:
    """
    Fake MinGW-w64 installation for both families, with C++ headers.

    Example:
        def test_headers(mingw_root):
            assert (mingw_root / "usr" / "x86_64-w64-mingw32" / "include").is_dir()
    """
    return build_mingw_tree(tmp_path / "mingw")


@pytest.fixture
def clang_bindir(tmp_path) -> Path:
    """Fake clang installation; returns its bin directory."""
    return build_clang_tree(tmp_path / "llvm")


@pytest.fixture
def linux_host() -> PlatformInfo:
    return PlatformInfo("linux", "x64")


@pytest.fixture
def driver_config(mingw_root) -> DriverConfig:
    """
    Config confined to ``mingw_root``.

    The toolchain root is the fake ``usr/bin`` and there are no standard C
    base directories, so nothing outside ``tmp_path`` is ever probed for C
    headers.
    """
    return DriverConfig(
        toolchain_root=str(mingw_root / "usr" / "bin"),
        std_include_bases=[],
        cxx_include_bases=["/usr", "/usr/lib/gcc"],
    )


@pytest.fixture
def driver_settings() -> DriverSettings:
    return DriverSettings()


@pytest.fixture
def driver_environ(clang_bindir) -> dict:
    """Environment with only the fake clang on PATH."""
    return {"PATH": str(clang_bindir), "HOME": os.environ.get("HOME", "/tmp")}
