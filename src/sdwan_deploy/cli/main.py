"""CLI entry point for the SD-WAN deployment orchestrator.

Implements the ``deploy-sdwan`` command, which selects one operation (full
deployment by default) and runs it through the
:class:`~sdwan_deploy.deploy.orchestrator.DeploymentOrchestrator`.
"""

from __future__ import annotations

import os
import signal
import sys
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from types import FrameType

import click

from sdwan_deploy import __version__
from sdwan_deploy.config.loader import load_config, load_env_file
from sdwan_deploy.deploy.orchestrator import EXIT_SIGTERM, DeploymentOrchestrator
from sdwan_deploy.lib.errors import ConfigError, DeploymentError, TerminationRequested
from sdwan_deploy.lib.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


@contextmanager
def handle_cli_errors() -> Generator[None, None, None]:
    """Context manager for consistent error handling before the run starts.

    Exit codes:
        2: Configuration error
        3: Deployment/execution error
    """
    try:
        yield
    except ConfigError as e:
        logger.debug(f"Configuration error: {e}")
        click.secho("Error: Configuration error", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        sys.exit(2)
    except DeploymentError as e:
        logger.debug(f"Deployment error: {e}")
        click.secho(f"Error: {e.operation} failed", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        sys.exit(3)


def _raise_termination(signum: int, _frame: FrameType | None) -> None:
    raise TerminationRequested(signal.Signals(signum).name, EXIT_SIGTERM)


@contextmanager
def terminate_on_sigterm() -> Generator[None, None, None]:
    """Turn SIGTERM into :class:`TerminationRequested` while the run is active."""
    previous = signal.signal(signal.SIGTERM, _raise_termination)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)


@click.command(
    name="deploy-sdwan",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "-d",
    "--deploy-only",
    "operation",
    flag_value="deploy",
    help="Deploy controllers only (skip validation)",
)
@click.option(
    "-v",
    "--validate-only",
    "operation",
    flag_value="validate",
    help="Run validation only (skip deployment)",
)
@click.option(
    "-c",
    "--cleanup",
    "operation",
    flag_value="cleanup",
    help="Remove all deployed components",
)
@click.option(
    "-H",
    "--health-check",
    "operation",
    flag_value="health",
    help="Run health check only",
)
@click.option("--force", is_flag=True, help="Skip confirmation prompts")
@click.option(
    "--dry-run",
    is_flag=True,
    help="Simulate deployment without making changes",
)
@click.option("--verbose", is_flag=True, help="Enable verbose output")
@click.option("--skip-validation", is_flag=True, help="Skip validation phase")
@click.option(
    "--project-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory containing the playbooks (default: current directory)",
)
@click.version_option(
    __version__,
    "--version",
    message="SD-WAN Deployment Automation v%(version)s",
)
def main(
    operation: str | None,
    force: bool,
    dry_run: bool,
    verbose: bool,
    skip_validation: bool,
    project_root: Path | None,
) -> None:
    """Cisco SD-WAN ESXi Deployment Automation.

    Runs a full deployment with validation unless an operation is selected.

    Examples:

        deploy-sdwan                      Full deployment with validation

        deploy-sdwan --deploy-only        Deploy only, skip validation

        deploy-sdwan --validate-only      Validate existing deployment

        deploy-sdwan --cleanup --force    Force cleanup without confirmation

        deploy-sdwan --health-check       Run health monitoring

    Environment variables:

        DEPLOY_MODE       Default operation (full|deploy|validate|cleanup|health)

        SKIP_VALIDATION   Skip validation (true|false)

        FORCE_DEPLOY      Force deployment (true|false)

        DRY_RUN           Dry run mode (true|false)

        VERBOSE           Verbose output (true|false)
    """
    setup_logging()

    with handle_cli_errors():
        root_hint = project_root or os.environ.get("SDWAN_PROJECT_ROOT")
        env_root = Path(root_hint) if root_hint else Path.cwd()
        if env_root.is_dir():
            load_env_file(env_root)

        config = load_config(
            overrides={
                "operation": operation or None,
                "force": force or None,
                "dry_run": dry_run or None,
                "verbose": verbose or None,
                "skip_validation": skip_validation or None,
                "project_root": project_root,
            }
        )

    setup_logging(verbose=config.verbose, log_file=config.log_file)
    logger.debug(
        f"Command invoked: operation={config.operation.value}, "
        f"force={config.force}, dry_run={config.dry_run}, "
        f"skip_validation={config.skip_validation}, root={config.project_root}"
    )

    orchestrator = DeploymentOrchestrator(config)
    with terminate_on_sigterm():
        exit_code = orchestrator.run()
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
