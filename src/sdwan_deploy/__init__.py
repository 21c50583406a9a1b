"""SD-WAN Deploy - orchestrate Cisco SD-WAN controller deployments on ESXi.

Wraps the Ansible playbooks that deploy, validate, configure and remove a
virtualized SD-WAN control plane, and keeps a small JSON record of the last
outcome between runs.

Main features:
- Full, deploy-only, validate-only, cleanup and health-check operations
- Prerequisite checks with automatic Ansible collection install
- Validation report parsing and a deployment summary
- Append-only per-run log files
"""

__version__ = "2.0.0"

__all__ = ["__version__"]
