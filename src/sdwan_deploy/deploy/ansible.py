"""Thin command builders around the Ansible CLI tools."""

from __future__ import annotations

from pathlib import Path

from sdwan_deploy.deploy.runner import ProcessRunner
from sdwan_deploy.lib.logging_config import get_logger

logger = get_logger(__name__)

ANSIBLE = "ansible"
ANSIBLE_PLAYBOOK = "ansible-playbook"
ANSIBLE_GALAXY = "ansible-galaxy"


def build_playbook_command(
    playbook: Path,
    inventory: Path,
    *,
    tags: str | None = None,
    verbose: bool = False,
    check: bool = False,
) -> list[str]:
    """Build an ``ansible-playbook`` argument list.

    Example:
        >>> build_playbook_command(Path("site.yml"), Path("hosts.yml"), check=True)
        ['ansible-playbook', 'site.yml', '-i', 'hosts.yml', '--check']
    """
    args = [ANSIBLE_PLAYBOOK, str(playbook), "-i", str(inventory)]
    if tags:
        args.extend(["--tags", tags])
    if verbose:
        args.append("-vvv")
    if check:
        args.append("--check")
    return args


class AnsibleEngine:
    """Invokes playbooks and collection management through a runner."""

    def __init__(self, runner: ProcessRunner, inventory: Path) -> None:
        self.runner = runner
        self.inventory = inventory

    def run_playbook(
        self,
        playbook: Path,
        *,
        tags: str | None = None,
        verbose: bool = False,
        check: bool = False,
        label: str | None = None,
    ) -> int:
        """Run a playbook against the inventory and return its exit status."""
        args = build_playbook_command(
            playbook, self.inventory, tags=tags, verbose=verbose, check=check
        )
        return self.runner.run(args, label=label or f"Running {playbook.name}")

    def version(self) -> str | None:
        """Return the installed Ansible version string, if it can be read."""
        result = self.runner.output([ANSIBLE, "--version"])
        if not result.ok or not result.stdout.strip():
            return None
        # "ansible [core 2.15.3]" or "ansible 2.9.27"
        first_line = result.stdout.splitlines()[0]
        return first_line.split(maxsplit=1)[-1].strip("[]").removeprefix("core ")

    def installed_collections(self) -> set[str]:
        """Return the names reported by ``ansible-galaxy collection list``."""
        result = self.runner.output([ANSIBLE_GALAXY, "collection", "list"])
        if not result.ok:
            logger.debug("ansible-galaxy collection list failed")
            return set()
        names = set()
        for line in result.stdout.splitlines():
            fields = line.split()
            if fields and "." in fields[0] and not fields[0].startswith("#"):
                names.add(fields[0])
        return names

    def install_collection(self, name: str) -> bool:
        """Install a collection from Galaxy; output goes to the run log."""
        status = self.runner.run(
            [ANSIBLE_GALAXY, "collection", "install", name],
            label=f"Installing {name}",
        )
        return status == 0
