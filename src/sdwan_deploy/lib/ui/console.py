"""Banner and section rendering for the orchestrator console."""

from __future__ import annotations

import click

from sdwan_deploy.lib.ui.colors import ANSIColors, colorize

BANNER_WIDTH = 60
SECTION_RULE = "━" * 54


def print_header(version: str) -> None:
    """Print the tool banner."""
    title = f"Cisco SD-WAN ESXi Deployment Automation v{version}"
    inner = title.center(BANNER_WIDTH)
    color = ANSIColors.BOLD + ANSIColors.BLUE
    click.echo()
    click.echo(colorize("╔" + "═" * BANNER_WIDTH + "╗", color))
    click.echo(colorize("║" + inner + "║", color))
    click.echo(colorize("╚" + "═" * BANNER_WIDTH + "╝", color))
    click.echo()


def print_section(title: str) -> None:
    """Print a section divider with its title."""
    click.echo()
    click.echo(colorize(SECTION_RULE, ANSIColors.CYAN))
    click.echo(colorize(f"  {title}", ANSIColors.CYAN))
    click.echo(colorize(SECTION_RULE, ANSIColors.CYAN))
    click.echo()
