"""Deployment engine for the SD-WAN controller cluster.

This package sequences the Ansible playbooks that deploy, validate and remove
the controllers, and tracks the outcome in a small JSON state file.
"""

from sdwan_deploy.deploy.orchestrator import DeploymentOrchestrator
from sdwan_deploy.deploy.runner import CommandOutput, ProcessRunner, SubprocessRunner

__all__ = [
    "CommandOutput",
    "DeploymentOrchestrator",
    "ProcessRunner",
    "SubprocessRunner",
]
