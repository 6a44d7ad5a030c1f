"""Test fixtures for wclang tests.

- toolchains: Fake MinGW-w64 and clang installations, configs and settings

Import fixtures in your tests using:
    from tests.fixtures.toolchains import mingw_root
"""

__all__ = [
    "toolchains",
]
