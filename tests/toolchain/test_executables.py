"""Tests for executable lookup on PATH."""

import os

import pytest

from tests.fixtures.toolchains import make_executable, touch
from wclang.core.exceptions import ExecutableNotFoundError
from wclang.toolchain.executables import (
    command_directory,
    find_executable,
    is_build_cache_wrapper,
    prepend_search_path,
    resolve_command,
)


class TestFindExecutable:
    def test_first_match_wins(self, tmp_path):
        first = make_executable(tmp_path / "a" / "clang")
        make_executable(tmp_path / "b" / "clang")
        path = os.pathsep.join([str(tmp_path / "a"), str(tmp_path / "b")])

        assert find_executable("clang", path) == first.resolve()

    def test_skips_non_executable(self, tmp_path):
        touch(tmp_path / "a" / "clang")
        second = make_executable(tmp_path / "b" / "clang")
        path = os.pathsep.join([str(tmp_path / "a"), str(tmp_path / "b")])

        assert find_executable("clang", path) == second.resolve()

    def test_not_found(self, tmp_path):
        assert find_executable("clang", str(tmp_path)) is None
        assert find_executable("clang", None) is None

    def test_skips_ccache_symlink(self, tmp_path):
        """Test a ccache masquerade directory is skipped for the real compiler."""
        ccache = make_executable(tmp_path / "ccache-bin" / "ccache")
        masquerade = tmp_path / "lib" / "ccache"
        masquerade.mkdir(parents=True)
        (masquerade / "clang").symlink_to(ccache)
        real = make_executable(tmp_path / "llvm" / "bin" / "clang")

        path = os.pathsep.join([str(masquerade), str(real.parent)])

        assert find_executable("clang", path) == real.resolve()

    def test_resolves_symlinks(self, tmp_path):
        real = make_executable(tmp_path / "llvm-15" / "bin" / "clang-15")
        links = tmp_path / "usr-bin"
        links.mkdir()
        (links / "clang").symlink_to(real)

        assert command_directory("clang", str(links)) == real.resolve().parent


class TestResolveCommand:
    def test_keeps_invoked_name(self, tmp_path):
        """Test the real directory is used with the original command name."""
        real = make_executable(tmp_path / "llvm" / "bin" / "clang-15")
        links = tmp_path / "links"
        links.mkdir()
        (links / "clang").symlink_to(real)

        resolved = resolve_command("clang", str(links))

        assert resolved == real.resolve().parent / "clang"

    def test_absolute_command_untouched(self, tmp_path):
        assert str(resolve_command("/opt/bin/clang", str(tmp_path))) == "/opt/bin/clang"

    def test_missing_raises(self, tmp_path):
        with pytest.raises(ExecutableNotFoundError, match="x86_64-w64-mingw32-gcc"):
            command_directory("x86_64-w64-mingw32-gcc", str(tmp_path))


class TestHelpers:
    def test_is_build_cache_wrapper(self, tmp_path):
        assert is_build_cache_wrapper(tmp_path / "ccache")
        assert is_build_cache_wrapper(tmp_path / "sccache")
        assert not is_build_cache_wrapper(tmp_path / "clang")

    def test_prepend_search_path(self):
        assert prepend_search_path("/opt/bin", "/usr/bin") == f"/opt/bin{os.pathsep}/usr/bin"
        assert prepend_search_path("/opt/bin", "") == "/opt/bin"
        assert prepend_search_path("/opt/bin", None) == "/opt/bin"
