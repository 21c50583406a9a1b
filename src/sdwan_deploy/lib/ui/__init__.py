"""UI utilities for terminal-based progress display.

This module provides shared utilities for terminal interaction, including:
- TTY detection for adaptive output formatting
- Spinner animation while playbooks run
- ANSI color support with graceful degradation
- Banner and section rendering for the orchestrator console
"""

from sdwan_deploy.lib.ui.colors import ANSIColors, colorize
from sdwan_deploy.lib.ui.console import print_header, print_section
from sdwan_deploy.lib.ui.spinner import ProcessSpinner, SpinnerMixin
from sdwan_deploy.lib.ui.terminal import is_tty

__all__ = [
    "ANSIColors",
    "ProcessSpinner",
    "SpinnerMixin",
    "colorize",
    "is_tty",
    "print_header",
    "print_section",
]
