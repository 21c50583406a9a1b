"""Process execution for the orchestrator.

All external tools (``ansible-playbook``, ``ansible-galaxy``, ``ping``, the
health-check script) are started through a :class:`ProcessRunner`, so tests
can substitute a scripted runner for the real subprocess one.
"""

from __future__ import annotations

import shutil
import subprocess  # nosec B404
import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from sdwan_deploy.lib.logging_config import flush_handlers, get_logger
from sdwan_deploy.lib.ui.spinner import ProcessSpinner

logger = get_logger(__name__)

# Exit status reported when the program cannot be started
EXIT_NOT_FOUND = 127


@dataclass
class CommandOutput:
    """Result of a command whose output was captured.

    Attributes:
        returncode: Process exit status
        stdout: Captured standard output
    """

    returncode: int
    stdout: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ProcessRunner(ABC):
    """Capability interface for starting external processes."""

    @abstractmethod
    def run(
        self,
        args: Sequence[str],
        *,
        label: str | None = None,
        log_output: bool = True,
    ) -> int:
        """Run a command to completion and return its exit status.

        Args:
            args: Program and arguments
            label: Text shown next to the spinner while the command runs
            log_output: Append output to the run log instead of the terminal

        Returns:
            Exit status, 127 if the program could not be started
        """

    @abstractmethod
    def output(self, args: Sequence[str]) -> CommandOutput:
        """Run a command and capture its standard output."""

    @abstractmethod
    def which(self, program: str) -> str | None:
        """Return the full path of a program on PATH, or None."""


class SubprocessRunner(ProcessRunner):
    """Runs commands with :mod:`subprocess`, blocking until they exit.

    Output of logged commands is appended to ``log_file``. A spinner is drawn
    while a labelled command runs on an interactive terminal.
    """

    def __init__(
        self,
        log_file: Path | None = None,
        cwd: Path | None = None,
        poll_interval: float = 0.1,
        show_spinner: bool = True,
    ) -> None:
        self.log_file = log_file
        self.cwd = cwd
        self.poll_interval = poll_interval
        self.show_spinner = show_spinner

    def run(
        self,
        args: Sequence[str],
        *,
        label: str | None = None,
        log_output: bool = True,
    ) -> int:
        command = [str(arg) for arg in args]
        logger.debug(f"Running: {' '.join(command)}")
        flush_handlers()

        with ExitStack() as stack:
            sink: IO[bytes] | None = None
            if log_output and self.log_file is not None:
                self.log_file.parent.mkdir(parents=True, exist_ok=True)
                sink = stack.enter_context(self.log_file.open("ab"))

            try:
                process = subprocess.Popen(  # noqa: S603  # nosec B603
                    command,
                    cwd=self.cwd,
                    stdout=sink,
                    stderr=subprocess.STDOUT if sink is not None else None,
                )
            except OSError as exc:
                logger.error(f"Cannot start {command[0]}: {exc}")
                return EXIT_NOT_FOUND

            spinner = None
            if label and log_output and self.show_spinner:
                spinner = ProcessSpinner(label)

            try:
                while process.poll() is None:
                    if spinner is not None:
                        spinner.tick()
                    time.sleep(self.poll_interval)
            except BaseException:
                process.terminate()
                process.wait()
                raise
            finally:
                if spinner is not None:
                    spinner.clear()

        logger.debug(f"{command[0]} exited with {process.returncode}")
        return process.returncode

    def output(self, args: Sequence[str]) -> CommandOutput:
        command = [str(arg) for arg in args]
        logger.debug(f"Running: {' '.join(command)}")
        try:
            result = subprocess.run(  # noqa: S603  # nosec B603
                command,
                cwd=self.cwd,
                capture_output=True,
                text=True,
            )
        except OSError as exc:
            logger.debug(f"Cannot start {command[0]}: {exc}")
            return CommandOutput(returncode=EXIT_NOT_FOUND)
        return CommandOutput(returncode=result.returncode, stdout=result.stdout)

    def which(self, program: str) -> str | None:
        return shutil.which(program)
