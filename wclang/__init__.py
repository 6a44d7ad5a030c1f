"""
wclang - clang driver front-end for MinGW-w64 cross compilation.

Invoked as ``<target>-clang`` / ``<target>-clang++`` (or ``w32-clang``,
``w64-clang++``), it works out the Windows target and its header
directories and replaces itself with a fully configured clang invocation.
"""

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("wclang")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = ["__version__"]
