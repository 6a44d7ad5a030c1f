"""Tests for MinGW target triples and families."""

import pytest

from wclang.toolchain.targets import (
    TARGET_TRIPLES,
    TargetFamily,
    TargetTriple,
    family_triples,
    match_family_marker,
    match_triple,
)


class TestTargetTriples:
    def test_families_are_disjoint(self):
        win32 = set(TARGET_TRIPLES[TargetFamily.WIN32])
        win64 = set(TARGET_TRIPLES[TargetFamily.WIN64])
        assert not win32 & win64

    def test_mainstream_first(self):
        assert family_triples(TargetFamily.WIN32)[0] == "i686-w64-mingw32"
        assert family_triples(TargetFamily.WIN64)[0] == "x86_64-w64-mingw32"

    @pytest.mark.parametrize("name", TARGET_TRIPLES[TargetFamily.WIN32])
    def test_match_win32(self, name):
        triple = match_triple(name)
        assert triple.family is TargetFamily.WIN32
        assert not triple.is_64bit

    @pytest.mark.parametrize("name", TARGET_TRIPLES[TargetFamily.WIN64])
    def test_match_win64(self, name):
        triple = match_triple(name)
        assert triple.family is TargetFamily.WIN64
        assert triple.is_64bit

    def test_match_requires_exact_spelling(self):
        assert match_triple("x86_64-w64-mingw") is None
        assert match_triple("w64") is None


class TestTargetTriple:
    def test_arch(self):
        assert TargetTriple("x86_64-w64-mingw32", TargetFamily.WIN64).arch == "x86_64"
        assert TargetTriple("i586-mingw32msvc", TargetFamily.WIN32).arch == "i586"

    def test_arch_without_dash(self):
        assert TargetTriple("nodash", TargetFamily.WIN32).arch is None

    def test_tool_name(self):
        triple = TargetTriple("i686-w64-mingw32", TargetFamily.WIN32)
        assert triple.tool_name("gcc") == "i686-w64-mingw32-gcc"
        assert str(triple) == "i686-w64-mingw32"


class TestFamilyMarkers:
    def test_markers(self):
        assert match_family_marker("w32") is TargetFamily.WIN32
        assert match_family_marker("w64") is TargetFamily.WIN64

    def test_marker_is_prefix_match(self):
        assert match_family_marker("w64-static") is TargetFamily.WIN64

    def test_unknown(self):
        assert match_family_marker("x86_64-linux-gnu") is None

    def test_descriptions(self):
        assert TargetFamily.WIN32.description == "32 bit"
        assert TargetFamily.WIN64.description == "64 bit"
