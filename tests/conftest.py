"""Pytest configuration and shared fixtures for orchestrator tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator, Sequence
from pathlib import Path

import pytest

from sdwan_deploy.deploy.runner import EXIT_NOT_FOUND, CommandOutput, ProcessRunner
from sdwan_deploy.lib.logging_config import PACKAGE_LOGGER
from sdwan_deploy.models.config import OrchestratorConfig

REQUIRED_FILES = (
    "deploy_sdwan.yml",
    "validate_sdwan.yml",
    "inventory/hosts.yml",
    "vars/deployment_config.yml",
)

GALAXY_LISTING = """
# /home/ops/.ansible/collections/ansible_collections
Collection        Version
----------------- -------
ansible.netcommon 5.3.0
cisco.ios         5.2.0
community.vmware  4.0.1
"""


class FakeRunner(ProcessRunner):
    """Scripted process runner that records every invocation.

    ``statuses`` maps a program name or a file name appearing in the
    arguments (e.g. ``"deploy_sdwan.yml"``) to the exit status to return.
    Everything else exits 0.
    """

    def __init__(
        self,
        statuses: dict[str, int] | None = None,
        programs: Sequence[str] = ("ansible", "python3"),
        outputs: dict[str, CommandOutput] | None = None,
    ) -> None:
        self.statuses = statuses or {}
        self.programs = set(programs)
        self.outputs = {
            "ansible": CommandOutput(0, "ansible [core 2.15.3]\n  config file = None\n"),
            "python3": CommandOutput(0, "Python 3.11.4\n"),
            "ansible-galaxy": CommandOutput(0, GALAXY_LISTING),
        }
        self.outputs.update(outputs or {})
        self.calls: list[list[str]] = []
        self.output_calls: list[list[str]] = []

    def run(
        self,
        args: Sequence[str],
        *,
        label: str | None = None,
        log_output: bool = True,
    ) -> int:
        command = [str(arg) for arg in args]
        self.calls.append(command)
        for arg in command:
            for key in (arg, Path(arg).name):
                if key in self.statuses:
                    return self.statuses[key]
        return 0

    def output(self, args: Sequence[str]) -> CommandOutput:
        command = [str(arg) for arg in args]
        self.output_calls.append(command)
        if command[0] not in self.outputs:
            return CommandOutput(EXIT_NOT_FOUND)
        return self.outputs[command[0]]

    def which(self, program: str) -> str | None:
        return f"/usr/bin/{program}" if program in self.programs else None

    def calls_for(self, name: str) -> list[list[str]]:
        """Invocations whose arguments mention ``name``."""
        return [
            call
            for call in self.calls
            if any(arg == name or Path(arg).name == name for arg in call)
        ]


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Create a project directory holding every required input file."""
    root = tmp_path / "sdwan"
    for relative in REQUIRED_FILES:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("---\n", encoding="utf-8")
    (root / "vars" / "deployment_config.yml").write_text(
        'vcenter_host: "vcenter.lab.local"\nvmanage_host: "10.0.0.10"\n',
        encoding="utf-8",
    )
    return root


@pytest.fixture
def make_config(project_root: Path):
    """Factory for configurations rooted at ``project_root``."""

    def _make(**overrides) -> OrchestratorConfig:
        values = {
            "project_root": project_root,
            "run_id": "20240101_120000",
            "settle_interval": 0,
        }
        values.update(overrides)
        return OrchestratorConfig(**values)

    return _make


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def isolated_env() -> Generator[dict[str, str]]:
    """Provide isolated environment variables for testing.

    Saves current environment and restores after test.
    """
    original_env = os.environ.copy()
    yield original_env
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def runner_factory() -> type[FakeRunner]:
    """Expose FakeRunner for tests that need custom statuses or programs."""
    return FakeRunner


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None]:
    """Detach handlers installed by setup_logging during a test."""
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
