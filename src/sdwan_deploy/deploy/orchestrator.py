"""Deployment orchestrator for the SD-WAN controller cluster.

The orchestrator runs one operation (full, deploy, validate, cleanup or
health) as a strictly linear sequence of phases. Each phase shells out to an
external tool through a :class:`ProcessRunner`; a non-zero exit is recorded
in the state file and ends the run. Nothing is retried.
"""

from __future__ import annotations

import os
import re
import time
from collections.abc import Callable
from datetime import datetime
from typing import Any

import click

from sdwan_deploy import __version__
from sdwan_deploy.config import defaults
from sdwan_deploy.config.loader import load_deployment_vars
from sdwan_deploy.deploy.ansible import AnsibleEngine
from sdwan_deploy.deploy.reports import find_latest_report, load_latest_report
from sdwan_deploy.deploy.runner import ProcessRunner, SubprocessRunner
from sdwan_deploy.deploy.state import (
    UNKNOWN_STATE,
    clear_state,
    current_state_label,
    load_state,
    record_state,
)
from sdwan_deploy.lib.errors import (
    ConfigError,
    DeploymentError,
    SDWanDeployError,
    TerminationRequested,
)
from sdwan_deploy.lib.logging_config import SUCCESS, get_logger
from sdwan_deploy.lib.ui.console import SECTION_RULE, print_header, print_section
from sdwan_deploy.models.config import Operation, OrchestratorConfig
from sdwan_deploy.models.deployment_state import DeploymentState, DeploymentStatus

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_ERROR = 3
EXIT_SIGINT = 130
EXIT_SIGTERM = 143

# Phase tags stored with a failed state
PHASE_DEPLOYMENT = "deployment"
PHASE_VALIDATION = "validation"
PHASE_POST_CONFIG = "post_config"
PHASE_CLEANUP = "cleanup"
PHASE_HEALTH_CHECK = "health_check"

_YES = re.compile(r"^[Yy]$")


def read_line(text: str) -> str:
    """Prompt the operator for a line of input.

    End of input reads as an empty answer. Ctrl-C propagates as
    :class:`KeyboardInterrupt` so the run is finalized as interrupted.
    """
    click.echo(f"{text}: ", nl=False)
    try:
        return input()
    except EOFError:
        click.echo()
        return ""


class DeploymentOrchestrator:
    """Sequences the deployment phases for one run.

    Args:
        config: Resolved run configuration
        runner: Process runner; defaults to a subprocess runner logging to
            the run's log file
        prompt: Reads one line of operator input for confirmations
        sleep: Called with the settle interval between deploy and validate
    """

    def __init__(
        self,
        config: OrchestratorConfig,
        runner: ProcessRunner | None = None,
        prompt: Callable[[str], str] = read_line,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.runner = runner or SubprocessRunner(
            log_file=config.log_file, cwd=config.project_root
        )
        self.ansible = AnsibleEngine(self.runner, config.inventory)
        self.prompt = prompt
        self.sleep = sleep

    # ------------------------------------------------------------------
    # Run lifecycle
    # ------------------------------------------------------------------

    def run(self, operation: Operation | None = None) -> int:
        """Execute an operation and return the process exit code.

        Interrupts, termination requests and unexpected errors are routed
        through :meth:`finalize`, which records the run as interrupted.
        """
        operation = operation or self.config.operation
        try:
            self.setup_directories()
            self.write_run_marker()
            print_header(__version__)
            return self._execute(operation)
        except KeyboardInterrupt:
            return self.finalize(EXIT_SIGINT, "interrupted by user")
        except TerminationRequested as exc:
            return self.finalize(exc.exit_code, f"received {exc.signal_name}")
        except SDWanDeployError as exc:
            return self.finalize(EXIT_ERROR, str(exc))
        except Exception as exc:
            logger.debug("Unexpected error", exc_info=True)
            return self.finalize(EXIT_ERROR, f"unexpected error: {exc}")
        finally:
            self.remove_run_marker()

    def _execute(self, operation: Operation) -> int:
        logger.debug(f"Operation: {operation.value}, run id: {self.config.run_id}")

        if operation in (Operation.FULL, Operation.DEPLOY):
            if not self.check_existing_deployment():
                return EXIT_OK

        if operation is Operation.FULL:
            if self.check_prerequisites() > 0:
                return EXIT_FAILURE
            if not self.deploy_controllers():
                return EXIT_FAILURE
            if not self.config.skip_validation:
                self.wait_for_settle()
            if not self.validate_deployment():
                return EXIT_FAILURE
            self.post_deployment_config()
            self.generate_summary_report()
        elif operation is Operation.DEPLOY:
            if self.check_prerequisites() > 0:
                return EXIT_FAILURE
            if not self.deploy_controllers():
                return EXIT_FAILURE
            self.generate_summary_report()
        elif operation is Operation.VALIDATE:
            if not self.validate_deployment():
                return EXIT_FAILURE
            self.generate_summary_report()
        elif operation is Operation.CLEANUP:
            if not self.cleanup_deployment():
                return EXIT_FAILURE
        elif operation is Operation.HEALTH:
            if not self.run_health_check():
                return EXIT_FAILURE

        logger.log(SUCCESS, "Operation completed successfully!")
        return EXIT_OK

    def finalize(self, exit_code: int, reason: str) -> int:
        """Record an abnormal termination and return its exit code."""
        logger.error(f"Deployment terminated with exit code {exit_code}: {reason}")
        try:
            record_state(
                self.config.state_file,
                DeploymentStatus.FAILED,
                self.config.run_id,
                {"status": "interrupted", "exit_code": exit_code},
            )
        except DeploymentError as exc:
            logger.error(exc.message)
        return exit_code

    def setup_directories(self) -> None:
        """Create the log, report, backup and state directories."""
        logger.debug("Setting up working directories...")
        for directory in self.config.working_dirs:
            if not directory.is_dir():
                directory.mkdir(parents=True, exist_ok=True)
                logger.debug(f"Created directory: {directory}")

    def write_run_marker(self) -> None:
        """Write the current process id to the run marker file."""
        self.config.pid_file.parent.mkdir(parents=True, exist_ok=True)
        self.config.pid_file.write_text(f"{os.getpid()}\n", encoding="utf-8")

    def remove_run_marker(self) -> None:
        self.config.pid_file.unlink(missing_ok=True)

    def wait_for_settle(self) -> None:
        interval = self.config.settle_interval
        logger.info(f"Waiting {interval:g}s for services to stabilize...")
        self.sleep(interval)

    def check_existing_deployment(self) -> bool:
        """Ask before redeploying over a deployed cluster.

        Returns:
            True if the run should continue
        """
        previous = current_state_label(self.config.state_file)
        if previous != DeploymentStatus.DEPLOYED.value or self.config.force:
            return True

        logger.warning(f"Existing deployment detected (state: {previous})")
        response = self.prompt("Continue anyway? [y/N]")
        if _YES.match(response.strip()):
            return True
        logger.info("Deployment cancelled by user")
        return False

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def check_prerequisites(self) -> int:
        """Verify tools, collections and input files.

        Missing collections are installed on the fly. vCenter reachability
        is checked but never counted as an error.

        Returns:
            Number of unmet requirements
        """
        print_section("Prerequisites Check")
        errors = 0

        if self.runner.which("ansible") is None:
            logger.error("Ansible is not installed")
            errors += 1
        else:
            version = self.ansible.version() or "(unknown version)"
            logger.log(SUCCESS, f"Ansible {version} detected")

        if self.runner.which("python3") is None:
            logger.error("Python 3 is not installed")
            errors += 1
        else:
            result = self.runner.output(["python3", "--version"])
            fields = result.stdout.split()
            version = fields[1] if len(fields) > 1 else "(unknown version)"
            logger.log(SUCCESS, f"Python {version} detected")

        installed = self.ansible.installed_collections()
        for collection in self.config.required_collections:
            if collection in installed:
                logger.log(SUCCESS, f"Collection {collection} installed")
                continue
            logger.warning(f"Collection {collection} not found - installing...")
            if not self.ansible.install_collection(collection):
                logger.error(f"Failed to install collection {collection}")
                errors += 1

        for path in self.config.required_files:
            if path.is_file():
                logger.log(SUCCESS, f"Found: {path.name}")
            else:
                logger.error(f"Missing: {path}")
                errors += 1

        self._check_vcenter()

        if errors > 0:
            logger.error(f"Prerequisites check failed with {errors} error(s)")
            return errors

        logger.log(SUCCESS, "All prerequisites satisfied")
        return 0

    def _check_vcenter(self) -> None:
        if not self.config.deployment_vars.is_file():
            return
        host = self._deployment_vars().get("vcenter_host")
        if not host:
            logger.warning("No vcenter_host set in deployment vars")
            return
        status = self.runner.run(["ping", "-c", "1", "-W", "5", str(host)])
        if status == 0:
            logger.log(SUCCESS, f"vCenter reachable: {host}")
        else:
            logger.warning(f"Cannot reach vCenter: {host}")

    def deploy_controllers(self) -> bool:
        """Run the deployment playbook and record the outcome."""
        print_section("Deploying SD-WAN Controllers")
        logger.info("Starting deployment process...")
        if self.config.dry_run:
            logger.info("Dry run: playbook runs in check mode")

        status = self.ansible.run_playbook(
            self.config.deploy_playbook,
            verbose=self.config.verbose,
            check=self.config.dry_run,
            label="Deploying controllers",
        )
        if status != 0:
            logger.error(f"Deployment failed - check log: {self.config.log_file}")
            self._record_failure(PHASE_DEPLOYMENT, status)
            return False

        logger.log(SUCCESS, "Controllers deployed successfully")
        self._record(DeploymentStatus.DEPLOYED, {"status": "success"})
        return True

    def validate_deployment(self) -> bool:
        """Run the validation playbook and record the health result.

        A report whose status is not ``SUCCESS`` still counts as a passed
        validation, recorded with the ``warning`` sub-status.
        """
        print_section("Validating SD-WAN Control Plane")

        if self.config.skip_validation:
            logger.info("Validation skipped by user")
            return True

        logger.info("Running comprehensive validation...")
        logger.info("This may take 10-15 minutes...")

        status = self.ansible.run_playbook(
            self.config.validate_playbook,
            tags=defaults.VALIDATION_TAGS,
            verbose=self.config.verbose,
            label="Validating control plane",
        )
        if status != 0:
            logger.error(f"Validation failed - check log: {self.config.log_file}")
            self._record_failure(PHASE_VALIDATION, status)
            return False

        logger.log(SUCCESS, "Validation completed successfully")

        report = load_latest_report(self.config.report_dir)
        health_score = report.lookup("health_score")
        report_status = report.lookup("status")
        logger.info(f"Health Score: {health_score}/100")
        logger.info(f"Status: {report_status}")

        if report.succeeded:
            sub_status = "success"
        else:
            logger.warning("Validation passed but health score is below optimal")
            sub_status = "warning"
        self._record(
            DeploymentStatus.VALIDATED,
            {"status": sub_status, "health_score": health_score},
        )
        return True

    def post_deployment_config(self) -> bool:
        """Apply the optional post-deployment configuration playbook."""
        print_section("Post-Deployment Configuration")

        playbook = self.config.configure_playbook
        if not playbook.is_file():
            logger.info("No post-deployment configuration playbook found - skipping")
            return True

        logger.info("Applying post-deployment configuration...")
        status = self.ansible.run_playbook(playbook, label="Applying configuration")
        if status != 0:
            logger.warning(
                f"Configuration had some issues - check log: {self.config.log_file}"
            )
            self._record_failure(PHASE_POST_CONFIG, status)
            return False

        logger.log(SUCCESS, "Configuration applied successfully")
        return True

    def cleanup_deployment(self) -> bool:
        """Remove all deployed components after operator confirmation.

        Returns:
            False only if the cleanup playbook is missing or fails; a
            cancelled confirmation is a successful no-op
        """
        print_section("Cleanup Deployment")

        if not self.config.force:
            click.echo()
            logger.warning("This will remove all deployed SD-WAN components!")
            confirmation = self.prompt(
                f"Type '{defaults.CLEANUP_CONFIRMATION}' to confirm"
            )
            if confirmation != defaults.CLEANUP_CONFIRMATION:
                logger.info("Cleanup cancelled")
                return True

        logger.info("Starting cleanup process...")

        playbook = self.config.cleanup_playbook
        if not playbook.is_file():
            logger.error(f"Cleanup playbook not found: {playbook}")
            return False

        status = self.ansible.run_playbook(playbook, label="Removing controllers")
        if status != 0:
            logger.error(f"Cleanup failed - check log: {self.config.log_file}")
            self._record_failure(PHASE_CLEANUP, status)
            return False

        logger.log(SUCCESS, "Cleanup completed successfully")
        clear_state(self.config.state_file)
        return True

    def run_health_check(self) -> bool:
        """Run the health-check script; its output goes to the terminal."""
        print_section("Health Check")

        script = self.config.health_check_script
        if not script.is_file():
            logger.warning(f"Health check script not found: {script}")
            return False

        logger.info("Running health monitoring...")
        status = self.runner.run(["bash", str(script)], log_output=False)
        if status != 0:
            logger.warning("Health check reported issues")
            self._record_failure(PHASE_HEALTH_CHECK, status)
            return False

        logger.log(SUCCESS, "Health check completed")
        return True

    def generate_summary_report(self) -> None:
        """Print the deployment summary. Never modifies any file."""
        print_section("Deployment Summary")

        state = self._load_state_quietly()
        label = state.state.value if state else UNKNOWN_STATE
        deployment_id = state.deployment_id if state else self.config.run_id

        click.echo()
        click.secho("Deployment Summary", bold=True)
        click.echo(SECTION_RULE)
        click.echo(f"Deployment ID:     {deployment_id}")
        click.echo(f"Status:            {label}")
        click.echo(f"Timestamp:         {datetime.now().strftime('%c')}")
        click.echo(f"Log File:          {self.config.log_file}")
        click.echo()

        latest_html = find_latest_report(self.config.report_dir, ".html")
        if latest_html is not None:
            click.echo(f"Validation Report: {latest_html}")

        vmanage_host = self._deployment_vars().get(
            "vmanage_host", defaults.DEFAULT_VMANAGE_HOST
        )
        click.echo()
        click.secho("Next Steps:", bold=True)
        click.echo(f"1. Access vManage UI: https://{vmanage_host}")
        click.echo("2. Default credentials: admin/admin")
        click.echo("3. Review validation report for detailed status")
        click.echo("4. Configure device templates and policies")
        click.echo("5. Begin edge device onboarding")
        click.echo()

        if label == DeploymentStatus.VALIDATED.value:
            if find_latest_report(self.config.report_dir, ".json") is None:
                return
            report = load_latest_report(self.config.report_dir)
            click.secho("Quick Health Check:", bold=True)
            click.echo(SECTION_RULE)
            click.echo(f"Health Score:      {report.lookup('health_score')}/100")
            click.echo(
                "Controllers:       "
                f"{report.lookup('results.phase3.controllers_registered')}"
            )
            click.echo(
                "Active Connections: "
                f"{report.lookup('results.phase4.control_connections_up')}"
            )
            click.echo()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _record(
        self, status: DeploymentStatus, data: dict[str, Any]
    ) -> DeploymentState:
        return record_state(
            self.config.state_file, status, self.config.run_id, data
        )

    def _record_failure(self, phase: str, exit_code: int) -> DeploymentState:
        return self._record(
            DeploymentStatus.FAILED,
            {"status": "error", "phase": phase, "exit_code": exit_code},
        )

    def _load_state_quietly(self) -> DeploymentState | None:
        try:
            return load_state(self.config.state_file)
        except DeploymentError as exc:
            logger.warning(exc.message)
            return None

    def _deployment_vars(self) -> dict[str, Any]:
        try:
            return load_deployment_vars(self.config.deployment_vars)
        except ConfigError as exc:
            logger.warning(f"Cannot read deployment vars: {exc.message}")
            return {}


__all__ = [
    "EXIT_ERROR",
    "EXIT_FAILURE",
    "EXIT_OK",
    "EXIT_SIGINT",
    "EXIT_SIGTERM",
    "DeploymentOrchestrator",
    "read_line",
]
