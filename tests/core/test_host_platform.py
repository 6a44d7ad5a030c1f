"""
Unit tests for host platform detection.

Tests cover:
- PlatformInfo dataclass methods
- OS detection with mocking
- Architecture detection and normalization
- Cache behavior
"""

from unittest.mock import patch

from wclang.core.platform import (
    PlatformInfo,
    _detect_architecture,
    _detect_os,
    clear_platform_cache,
    detect_platform,
)


class TestPlatformInfo:
    """Tests for PlatformInfo dataclass."""

    def test_platform_string_linux_x64(self):
        """Test platform string generation for Linux x64."""
        assert PlatformInfo("linux", "x64").platform_string() == "linux-x64"

    def test_str_matches_platform_string(self):
        info = PlatformInfo("macos", "arm64")
        assert str(info) == "macos-arm64"

    def test_machine_triple_arch(self):
        """Test GNU triple spelling of architectures."""
        assert PlatformInfo("cygwin", "x64").machine_triple_arch() == "x86_64"
        assert PlatformInfo("cygwin", "x86").machine_triple_arch() == "i686"
        assert PlatformInfo("linux", "arm64").machine_triple_arch() == "aarch64"

    def test_machine_triple_arch_unknown_passthrough(self):
        assert PlatformInfo("linux", "riscv64").machine_triple_arch() == "riscv64"


class TestDetectOS:
    """Tests for OS detection."""

    @patch("platform.system")
    def test_detect_linux(self, mock_system):
        mock_system.return_value = "Linux"
        assert _detect_os() == "linux"

    @patch("platform.system")
    def test_detect_macos(self, mock_system):
        """Test Darwin is reported as macOS."""
        mock_system.return_value = "Darwin"
        assert _detect_os() == "macos"

    @patch("platform.system")
    def test_detect_cygwin(self, mock_system):
        """Test Cygwin reports its version in the system name."""
        mock_system.return_value = "CYGWIN_NT-10.0-19045"
        assert _detect_os() == "cygwin"

    @patch("platform.system")
    def test_detect_msys(self, mock_system):
        mock_system.return_value = "MSYS_NT-10.0"
        assert _detect_os() == "cygwin"

    @patch("platform.system")
    def test_detect_freebsd(self, mock_system):
        mock_system.return_value = "FreeBSD"
        assert _detect_os() == "freebsd"


class TestDetectArchitecture:
    """Tests for architecture detection."""

    @patch("platform.machine")
    def test_detect_x86_64(self, mock_machine):
        mock_machine.return_value = "x86_64"
        assert _detect_architecture() == "x64"

    @patch("platform.machine")
    def test_detect_amd64(self, mock_machine):
        mock_machine.return_value = "AMD64"
        assert _detect_architecture() == "x64"

    @patch("platform.machine")
    def test_detect_aarch64(self, mock_machine):
        mock_machine.return_value = "aarch64"
        assert _detect_architecture() == "arm64"

    @patch("platform.machine")
    def test_detect_i686(self, mock_machine):
        mock_machine.return_value = "i686"
        assert _detect_architecture() == "x86"

    @patch("platform.machine")
    def test_detect_armv7l(self, mock_machine):
        mock_machine.return_value = "armv7l"
        assert _detect_architecture() == "arm"


class TestDetectPlatform:
    """Tests for the cached detect_platform()."""

    def test_detect_platform_cached(self):
        """Test detection result is cached."""
        clear_platform_cache()
        assert detect_platform() is detect_platform()

    def test_clear_platform_cache(self):
        """Test clear_platform_cache forces re-detection."""
        info1 = detect_platform()
        clear_platform_cache()
        info2 = detect_platform()

        assert info1 is not info2
        assert info1 == info2
