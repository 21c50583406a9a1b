"""Pydantic models for orchestrator configuration.

The configuration is built once at startup by
:func:`sdwan_deploy.config.loader.load_config` and handed to every operation.
All file locations are derived from the project root.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sdwan_deploy.config import defaults


class Operation(str, Enum):
    """Top-level operation selected on the command line."""

    FULL = "full"
    DEPLOY = "deploy"
    VALIDATE = "validate"
    CLEANUP = "cleanup"
    HEALTH = "health"


class OrchestratorConfig(BaseModel):
    """Resolved settings for a single orchestrator run.

    Attributes:
        project_root: Directory holding playbooks, inventory and vars
        operation: Operation to execute
        force: Skip confirmation prompts
        dry_run: Run the deploy playbook in check mode
        skip_validation: Skip the validation phase
        verbose: Verbose console output and Ansible ``-vvv``
        settle_interval: Seconds to wait between deploy and validation
        run_id: Identifier of this run, also used in file names
        required_collections: Ansible collections checked before deploying
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    project_root: Path = Field(..., description="Project root directory")
    operation: Operation = Field(default=Operation.FULL)
    force: bool = Field(default=False, description="Skip confirmation prompts")
    dry_run: bool = Field(default=False, description="Ansible check mode")
    skip_validation: bool = Field(default=False, description="Skip validation")
    verbose: bool = Field(default=False, description="Verbose output")
    settle_interval: float = Field(
        default=defaults.SETTLE_INTERVAL,
        ge=0,
        description="Seconds to wait between deploy and validation",
    )
    run_id: str = Field(..., description="Run identifier")
    required_collections: tuple[str, ...] = Field(
        default=defaults.REQUIRED_COLLECTIONS,
        description="Ansible collections required for deployment",
    )

    @field_validator("run_id")
    @classmethod
    def validate_run_id(cls, v: str) -> str:
        """Reject run ids that cannot be embedded in a file name."""
        if not v or "/" in v or v.strip() != v:
            raise ValueError(f"Invalid run id: {v!r}")
        return v

    def _path(self, relative: str) -> Path:
        return self.project_root / relative

    @property
    def inventory(self) -> Path:
        return self._path(defaults.INVENTORY_FILE)

    @property
    def deploy_playbook(self) -> Path:
        return self._path(defaults.DEPLOY_PLAYBOOK)

    @property
    def validate_playbook(self) -> Path:
        return self._path(defaults.VALIDATE_PLAYBOOK)

    @property
    def configure_playbook(self) -> Path:
        return self._path(defaults.CONFIGURE_PLAYBOOK)

    @property
    def cleanup_playbook(self) -> Path:
        return self._path(defaults.CLEANUP_PLAYBOOK)

    @property
    def deployment_vars(self) -> Path:
        return self._path(defaults.DEPLOYMENT_VARS_FILE)

    @property
    def health_check_script(self) -> Path:
        return self._path(defaults.HEALTH_CHECK_SCRIPT)

    @property
    def log_dir(self) -> Path:
        return self._path(defaults.LOG_DIR)

    @property
    def report_dir(self) -> Path:
        return self._path(defaults.REPORT_DIR)

    @property
    def backup_dir(self) -> Path:
        return self._path(defaults.BACKUP_DIR)

    @property
    def state_dir(self) -> Path:
        return self._path(defaults.STATE_DIR)

    @property
    def state_file(self) -> Path:
        return self.state_dir / defaults.STATE_FILE_NAME

    @property
    def pid_file(self) -> Path:
        return self.state_dir / defaults.PID_FILE_NAME

    @property
    def log_file(self) -> Path:
        return self.log_dir / f"deployment_{self.run_id}.log"

    @property
    def working_dirs(self) -> list[Path]:
        """Directories created at the start of every run."""
        return [self.log_dir, self.report_dir, self.backup_dir, self.state_dir]

    @property
    def required_files(self) -> list[Path]:
        """Files that must exist before deploying."""
        return [
            self.deploy_playbook,
            self.validate_playbook,
            self.inventory,
            self.deployment_vars,
        ]
