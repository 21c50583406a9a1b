"""Unit tests for the deploy-sdwan CLI command.

Tests cover:
- Help and version output
- Mapping of operation flags and modifiers onto the configuration
- Environment defaults and CLI precedence
- Exit codes for configuration errors and unknown options
- SIGTERM handling around the run
"""

from __future__ import annotations

import signal
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from sdwan_deploy import __version__
from sdwan_deploy.cli.main import _raise_termination, main, terminate_on_sigterm
from sdwan_deploy.lib.errors import TerminationRequested
from sdwan_deploy.models.config import Operation

ENV_VARS = (
    "DEPLOY_MODE",
    "SKIP_VALIDATION",
    "FORCE_DEPLOY",
    "DRY_RUN",
    "VERBOSE",
    "SETTLE_INTERVAL",
    "SDWAN_PROJECT_ROOT",
)


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: Any) -> None:
    """Keep the operator's shell settings out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_orchestrator() -> Generator[MagicMock]:
    """Replace the orchestrator so no playbooks are started."""
    with patch("sdwan_deploy.cli.main.DeploymentOrchestrator") as mock_cls:
        mock_cls.return_value.run.return_value = 0
        yield mock_cls


def _invoked_config(mock_cls: MagicMock):
    return mock_cls.call_args.args[0]


@pytest.mark.unit
class TestHelpAndVersion:
    """Tests for informational options."""

    @pytest.mark.parametrize("flag", ["-h", "--help"])
    def test_help(self, runner: CliRunner, flag: str) -> None:
        result = runner.invoke(main, [flag])

        assert result.exit_code == 0
        assert "--deploy-only" in result.output
        assert "--health-check" in result.output
        assert "DEPLOY_MODE" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert f"SD-WAN Deployment Automation v{__version__}" in result.output

    def test_unknown_option_exits_2(
        self, runner: CliRunner, mock_orchestrator: MagicMock
    ) -> None:
        result = runner.invoke(main, ["--parallel"])

        assert result.exit_code == 2
        assert "No such option" in result.output
        mock_orchestrator.assert_not_called()


@pytest.mark.unit
class TestOperationSelection:
    """Tests for mapping flags onto the configuration."""

    @pytest.mark.parametrize(
        ("args", "expected"),
        [
            ([], Operation.FULL),
            (["-d"], Operation.DEPLOY),
            (["--deploy-only"], Operation.DEPLOY),
            (["-v"], Operation.VALIDATE),
            (["--validate-only"], Operation.VALIDATE),
            (["-c"], Operation.CLEANUP),
            (["--cleanup"], Operation.CLEANUP),
            (["-H"], Operation.HEALTH),
            (["--health-check"], Operation.HEALTH),
        ],
    )
    def test_operation_flags(
        self,
        runner: CliRunner,
        mock_orchestrator: MagicMock,
        tmp_path: Path,
        args: list[str],
        expected: Operation,
    ) -> None:
        result = runner.invoke(main, [*args, "--project-root", str(tmp_path)])

        assert result.exit_code == 0
        assert _invoked_config(mock_orchestrator).operation == expected

    def test_modifiers(
        self, runner: CliRunner, mock_orchestrator: MagicMock, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            main,
            [
                "--force",
                "--dry-run",
                "--verbose",
                "--skip-validation",
                "--project-root",
                str(tmp_path),
            ],
        )

        assert result.exit_code == 0
        config = _invoked_config(mock_orchestrator)
        assert config.force is True
        assert config.dry_run is True
        assert config.verbose is True
        assert config.skip_validation is True

    def test_deploy_only_skips_validation(
        self, runner: CliRunner, mock_orchestrator: MagicMock, tmp_path: Path
    ) -> None:
        runner.invoke(main, ["--deploy-only", "--project-root", str(tmp_path)])

        assert _invoked_config(mock_orchestrator).skip_validation is True

    def test_env_supplies_defaults(
        self, runner: CliRunner, mock_orchestrator: MagicMock, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            main,
            ["--project-root", str(tmp_path)],
            env={"DEPLOY_MODE": "health", "FORCE_DEPLOY": "true"},
        )

        assert result.exit_code == 0
        config = _invoked_config(mock_orchestrator)
        assert config.operation == Operation.HEALTH
        assert config.force is True

    def test_flag_beats_env(
        self, runner: CliRunner, mock_orchestrator: MagicMock, tmp_path: Path
    ) -> None:
        runner.invoke(
            main,
            ["--cleanup", "--project-root", str(tmp_path)],
            env={"DEPLOY_MODE": "validate"},
        )

        assert _invoked_config(mock_orchestrator).operation == Operation.CLEANUP

    def test_env_file_in_project_root(
        self, runner: CliRunner, mock_orchestrator: MagicMock, tmp_path: Path
    ) -> None:
        (tmp_path / ".env").write_text("DRY_RUN=true\n", encoding="utf-8")

        with patch.dict("os.environ", {}, clear=False):
            runner.invoke(main, ["--project-root", str(tmp_path)])

        assert _invoked_config(mock_orchestrator).dry_run is True

    def test_project_root_from_env(
        self, runner: CliRunner, mock_orchestrator: MagicMock, tmp_path: Path
    ) -> None:
        result = runner.invoke(main, [], env={"SDWAN_PROJECT_ROOT": str(tmp_path)})

        assert result.exit_code == 0
        assert _invoked_config(mock_orchestrator).project_root == tmp_path.resolve()


@pytest.mark.unit
class TestExitCodes:
    """Tests for exit code propagation."""

    @pytest.mark.parametrize("code", [0, 1, 3, 130, 143])
    def test_orchestrator_exit_code_is_returned(
        self,
        runner: CliRunner,
        mock_orchestrator: MagicMock,
        tmp_path: Path,
        code: int,
    ) -> None:
        mock_orchestrator.return_value.run.return_value = code

        result = runner.invoke(main, ["--project-root", str(tmp_path)])

        assert result.exit_code == code

    def test_missing_project_root_is_config_error(
        self, runner: CliRunner, mock_orchestrator: MagicMock, tmp_path: Path
    ) -> None:
        result = runner.invoke(main, ["--project-root", str(tmp_path / "missing")])

        assert result.exit_code == 2
        assert "Configuration error" in result.output
        mock_orchestrator.assert_not_called()

    def test_invalid_settle_interval_is_config_error(
        self, runner: CliRunner, mock_orchestrator: MagicMock, tmp_path: Path
    ) -> None:
        result = runner.invoke(
            main,
            ["--project-root", str(tmp_path)],
            env={"SETTLE_INTERVAL": "-10"},
        )

        assert result.exit_code == 2
        mock_orchestrator.assert_not_called()


@pytest.mark.unit
class TestSigtermHandling:
    """Tests for the SIGTERM bridge."""

    def test_handler_raises_termination(self) -> None:
        with pytest.raises(TerminationRequested) as exc_info:
            _raise_termination(signal.SIGTERM, None)

        assert exc_info.value.signal_name == "SIGTERM"
        assert exc_info.value.exit_code == 143

    def test_previous_handler_is_restored(self) -> None:
        before = signal.getsignal(signal.SIGTERM)

        with terminate_on_sigterm():
            assert signal.getsignal(signal.SIGTERM) is _raise_termination

        assert signal.getsignal(signal.SIGTERM) == before
