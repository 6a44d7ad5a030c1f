"""
Tests for the command-line entry point.

Logging is reconfigured by every run, so these tests read warnings and
errors from captured stderr and restore the root logger afterwards.
"""

import logging
from unittest.mock import patch

import pytest

from wclang.cli.main import DriverCLI, configure_logging, main
from wclang.toolchain.environment import COMPANION_TOOLS

pytestmark = pytest.mark.usefixtures("restore_logging")


@pytest.fixture
def overlay(tmp_path, driver_config):
    """WCLANG_CONFIG file confining discovery to the fake installation."""
    config_file = tmp_path / "wclang.yaml"
    config_file.write_text(
        f"toolchain_root: {driver_config.toolchain_root}\n"
        "std_include_bases: []\n"
        "cxx_include_bases: [/usr, /usr/lib/gcc]\n"
    )
    return config_file


@pytest.fixture
def cli_environ(driver_environ, overlay):
    return dict(driver_environ, WCLANG_CONFIG=str(overlay))


def run_cli(argv, environ, linux_host=None):
    return DriverCLI(environ, linux_host).run(argv)


class TestConfigureLogging:
    def test_default_level(self):
        configure_logging(verbose=False)
        assert logging.getLogger().level == logging.WARNING

    def test_verbose_level(self):
        configure_logging(verbose=True)
        assert logging.getLogger().level == logging.DEBUG


class TestIntrospection:
    @patch("wclang.driver.executor.os.execve")
    def test_env_prints_one_line(self, mock_execve, cli_environ, linux_host, capsys):
        """Test -wc-env prints every companion tool and never execs."""
        code = run_cli(["w64-clang", "-wc-env"], cli_environ, linux_host)

        out = capsys.readouterr().out
        assert code == 0
        assert out.count("\n") == 1
        for tool in COMPANION_TOOLS:
            assert f"{tool}=x86_64-w64-mingw32-{tool.lower()}" in out
        mock_execve.assert_not_called()

    def test_target(self, cli_environ, linux_host, capsys):
        code = run_cli(["/usr/local/bin/w32-clang++", "--wc-target"], cli_environ, linux_host)

        assert code == 0
        assert capsys.readouterr().out == "i686-w64-mingw32\n"

    def test_unknown_env_tool(self, cli_environ, linux_host, capsys):
        code = run_cli(["w64-clang", "-wc-env-foo"], cli_environ, linux_host)

        captured = capsys.readouterr()
        assert code == 1
        assert "environment variable FOO not found" in captured.err
        assert captured.out == ""


class TestErrors:
    def test_unknown_pseudo_flag(self, cli_environ, linux_host, capsys):
        """Test an unknown pseudo-flag exits 1 naming the token."""
        code = run_cli(["w64-clang", "main.c", "-wc-frobnicate"], cli_environ, linux_host)

        assert code == 1
        assert "invalid argument: -wc-frobnicate" in capsys.readouterr().err

    def test_bad_invocation_name(self, cli_environ, capsys):
        code = run_cli(["wclang"], cli_environ)

        assert code == 1
        assert "invalid invocation name" in capsys.readouterr().err

    def test_missing_target(self, tmp_path, driver_environ, capsys):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text(f"toolchain_root: {tmp_path / 'none'}\nstd_include_bases: []\n")
        environ = dict(driver_environ, WCLANG_CONFIG=str(config_file))

        code = run_cli(["w32-clang", "-c", "a.c"], environ)

        assert code == 1
        assert "cannot find mingw-w64 (32 bit) installation" in capsys.readouterr().err

    def test_missing_config_file(self, tmp_path, driver_environ, capsys):
        environ = dict(driver_environ, WCLANG_CONFIG=str(tmp_path / "missing.yaml"))

        assert run_cli(["w64-clang"], environ) == 1
        assert "Configuration file not found" in capsys.readouterr().err

    @patch("wclang.driver.executor.os.execve")
    def test_launch_failure(self, mock_execve, cli_environ, linux_host, capsys):
        mock_execve.side_effect = FileNotFoundError(2, "No such file")

        code = run_cli(["w64-clang", "-c", "a.c"], cli_environ, linux_host)

        assert code == 1
        assert "invoking compiler failed" in capsys.readouterr().err


class TestExec:
    @patch("wclang.driver.executor.os.execve")
    def test_compile_execs_clang(self, mock_execve, cli_environ, linux_host, clang_bindir):
        argv = ["x86_64-w64-mingw32-clang", "-c", "a.c", "-o", "a.o"]
        code = run_cli(argv, cli_environ, linux_host)

        assert code == 0
        path, argv, env = mock_execve.call_args[0]
        assert path == str(clang_bindir.resolve() / "clang")
        assert argv[-4:] == ["-c", "a.c", "-o", "a.o"]
        assert "-target" in argv
        assert env["LD"] == "x86_64-w64-mingw32-ld"

    @patch("wclang.driver.executor.os.execve")
    def test_verbose_trace(self, mock_execve, cli_environ, linux_host, capsys):
        """Test -wc-verbose logs the command in and out and the timing."""
        run_cli(["w64-clang", "-wc-verbose", "-c", "a.c"], cli_environ, linux_host)

        err = capsys.readouterr().err
        assert "command in: w64-clang -wc-verbose -c a.c" in err
        assert "command out: " in err
        assert "arguments parsed +" in err
        argv = mock_execve.call_args[0][1]
        assert "-wc-verbose" not in argv

    @patch("wclang.driver.executor.os.execve")
    def test_static_runtime_ignored_for_compile(self, mock_execve, cli_environ, linux_host):
        run_cli(["w64-clang++", "-wc-static-runtime", "-c", "a.cc"], cli_environ, linux_host)

        argv = mock_execve.call_args[0][1]
        assert "-static-libstdc++" not in argv

    @patch("wclang.driver.executor.subprocess.run")
    @patch("wclang.driver.executor.os.execve")
    def test_static_runtime_link(self, mock_execve, mock_run, cli_environ, linux_host):
        mock_run.return_value.returncode = 1
        mock_run.return_value.stdout = ""

        argv = ["w64-clang++", "-wc-static-runtime", "a.o", "-o", "a.exe"]
        run_cli(argv, cli_environ, linux_host)

        argv = mock_execve.call_args[0][1]
        assert argv[1:3] == ["-static-libgcc", "-static-libstdc++"]


class TestMain:
    def test_main_uses_given_argv(self, cli_environ, capsys):
        assert main(["w64-clang", "-wc-version"], cli_environ) == 0
        assert capsys.readouterr().out.startswith("wclang, Version: ")
