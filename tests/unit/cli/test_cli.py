"""Unit tests for sandboxfs.cli module."""

import importlib
import json

import pytest
import typer
from typer.testing import CliRunner

from sandboxfs import __version__
from sandboxfs.cli import app
from sandboxfs.cli.constants import ExitCodes

# The package re-exports the Typer object under the submodule name
cli_app_module = importlib.import_module("sandboxfs.cli.app")


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keep the CLI from reconfiguring root logging onto the runner's streams."""
    monkeypatch.setattr(cli_app_module, "setup_logging", lambda level: None)
    monkeypatch.delenv("SANDBOXFS_ROOT", raising=False)
    monkeypatch.delenv("VW_PROJECTS_PATH", raising=False)


@pytest.mark.unit
@pytest.mark.cli
class TestCLIFramework:
    """Tests for CLI framework and structure."""

    def test_app_is_typer_instance(self):
        """Test that CLI app is a Typer instance."""
        assert isinstance(app, typer.Typer)
        assert cli_app_module.app is app

    def test_app_has_help_text(self):
        """Test that Typer app has help text configured."""
        assert "sandboxfs" in app.info.help


@pytest.mark.unit
@pytest.mark.cli
class TestGlobalOptions:
    """Tests for --help, --version and --check."""

    def setup_method(self):
        """Set up test runner."""
        self.runner = CliRunner()

    def test_help_flag_succeeds(self):
        """Test --help lists the subcommands."""
        result = self.runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "serve" in result.stdout
        assert "call" in result.stdout

    def test_version(self):
        """Test --version prints the package version."""
        result = self.runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"sandboxfs version {__version__}" in result.stdout

    def test_check_shows_configuration(self, sandbox_root):
        """Test --check prints configuration and exits without serving."""
        result = self.runner.invoke(app, ["--root", str(sandbox_root), "--check"])

        assert result.exit_code == 0
        assert "Chunk size" in result.stdout
        assert "change_permissions" in result.stdout

    def test_missing_root_is_configuration_error(self, tmp_path):
        """Test a root that does not exist exits with a general error."""
        result = self.runner.invoke(app, ["--root", str(tmp_path / "missing"), "--check"])

        assert result.exit_code == ExitCodes.GENERAL_ERROR

    def test_serve_invokes_server(self, sandbox_root, monkeypatch):
        """Test the serve command hands the validated config to the server."""
        served = []
        monkeypatch.setattr(cli_app_module, "run_server", served.append)

        result = self.runner.invoke(app, ["--root", str(sandbox_root), "serve"])

        assert result.exit_code == 0
        assert served[0].root == sandbox_root

    def test_no_subcommand_serves(self, sandbox_root, monkeypatch):
        """Test running without a subcommand starts the server too."""
        served = []
        monkeypatch.setattr(cli_app_module, "run_server", served.append)

        result = self.runner.invoke(app, ["--root", str(sandbox_root)])

        assert result.exit_code == 0
        assert len(served) == 1

    def test_interrupt_exit_code(self, sandbox_root, monkeypatch):
        """Test Ctrl+C while serving exits with the interrupted code."""

        def interrupted(config):
            raise KeyboardInterrupt

        monkeypatch.setattr(cli_app_module, "run_server", interrupted)

        result = self.runner.invoke(app, ["--root", str(sandbox_root), "serve"])

        assert result.exit_code == ExitCodes.INTERRUPTED


@pytest.mark.unit
@pytest.mark.cli
class TestToolCommands:
    """Tests for the tools and call commands."""

    def setup_method(self):
        """Set up test runner."""
        self.runner = CliRunner()

    def test_tools_lists_names(self, sandbox_root):
        """Test the tools table includes tool names."""
        result = self.runner.invoke(app, ["--root", str(sandbox_root), "tools"])

        assert result.exit_code == 0
        assert "read_file" in result.stdout
        assert "explore_projects" in result.stdout

    def test_call_with_json_arguments(self, sample_tree):
        """Test call prints a tool's text payload verbatim."""
        result = self.runner.invoke(
            app,
            ["--root", str(sample_tree), "call", "read_file", json.dumps({"path": "web/a.txt"})],
        )

        assert result.exit_code == 0
        assert result.stdout == "alpha\n\n"

    def test_call_with_key_value_arguments(self, sample_tree):
        """Test -a key=value arguments are passed to the tool."""
        result = self.runner.invoke(
            app, ["--root", str(sample_tree), "call", "find_files", "-a", "pattern=*.txt"]
        )

        assert result.exit_code == 0
        assert "web/a.txt" in result.stdout

    def test_call_numeric_value_decoded(self, sample_tree):
        """Test key=value numbers are decoded before validation."""
        result = self.runner.invoke(
            app, ["--root", str(sample_tree), "call", "explore_projects", "-a", "depth=1"]
        )

        assert result.exit_code == 0
        assert '"api/": "..."' in result.stdout

    def test_call_tool_failure(self, sample_tree):
        """Test a failing tool exits with a general error."""
        result = self.runner.invoke(
            app, ["--root", str(sample_tree), "call", "read_file", "-a", "path=missing.txt"]
        )

        assert result.exit_code == ExitCodes.GENERAL_ERROR

    def test_call_unknown_tool(self, sandbox_root):
        """Test an unknown tool name is a usage error."""
        result = self.runner.invoke(app, ["--root", str(sandbox_root), "call", "format_disk"])

        assert result.exit_code == ExitCodes.USAGE_ERROR

    @pytest.mark.parametrize("args", [["[1, 2]"], ["{not json"], ["-a", "novalue"]])
    def test_call_bad_arguments(self, sandbox_root, args):
        """Test malformed CLI arguments are a usage error."""
        result = self.runner.invoke(
            app, ["--root", str(sandbox_root), "call", "read_file", *args]
        )

        assert result.exit_code == ExitCodes.USAGE_ERROR
