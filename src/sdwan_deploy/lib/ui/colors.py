"""ANSI color utilities for terminal output.

Provides color constants and helper functions for colorized terminal output
with graceful degradation in non-TTY environments.
"""

from sdwan_deploy.lib.ui.terminal import is_tty


class ANSIColors:
    """ANSI color escape codes for terminal output.

    Attributes:
        GREEN: Green (success tags).
        RED: Red (error tags).
        YELLOW: Bright yellow (warnings).
        BLUE: Blue (info tags and the banner).
        CYAN: Cyan (section rules and debug tags).
        BOLD: Bold weight.
        RESET: Reset code to restore default terminal color.
    """

    GREEN = "\033[0;32m"
    RED = "\033[0;31m"
    YELLOW = "\033[1;33m"
    BLUE = "\033[0;34m"
    CYAN = "\033[0;36m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


def colorize(text: str, color: str, force_tty: bool | None = None) -> str:
    """Apply ANSI color codes to text if in TTY mode.

    Args:
        text: Text to colorize.
        color: ANSI color code to apply (e.g., ANSIColors.GREEN).
        force_tty: Override TTY detection (for testing). None uses auto-detection.

    Returns:
        Colorized text if in TTY mode, plain text otherwise.
    """
    use_colors = force_tty if force_tty is not None else is_tty()
    if not use_colors:
        return text
    return f"{color}{text}{ANSIColors.RESET}"
