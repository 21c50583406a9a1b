"""Spinner animation shown while an external process is running."""

from __future__ import annotations

import sys
from typing import ClassVar, TextIO

from sdwan_deploy.lib.ui.terminal import is_tty


class SpinnerMixin:
    """Mixin providing spinner animation functionality.

    Classes using this mixin should initialize _spinner_index = 0 in their
    __init__.

    Class Attributes:
        SPINNER_CHARS: List of braille characters for spinner animation.
    """

    SPINNER_CHARS: ClassVar[list[str]] = [
        "\u280b",  # ⠋
        "\u2819",  # ⠙
        "\u2839",  # ⠹
        "\u2838",  # ⠸
        "\u283c",  # ⠼
        "\u2834",  # ⠴
        "\u2826",  # ⠦
        "\u2827",  # ⠧
        "\u2807",  # ⠇
        "\u280f",  # ⠏
    ]
    _spinner_index: int

    def get_spinner_char(self) -> str:
        """Get current spinner character and advance rotation.

        Returns:
            Current spinner character from the braille sequence.
        """
        char = self.SPINNER_CHARS[self._spinner_index % len(self.SPINNER_CHARS)]
        self._spinner_index += 1
        return char


class ProcessSpinner(SpinnerMixin):
    """Liveness indicator drawn on a single terminal line.

    Frames are only written when the stream is a TTY, so redirected output
    and CI logs stay clean.
    """

    def __init__(
        self,
        message: str,
        stream: TextIO | None = None,
        force_tty: bool | None = None,
    ) -> None:
        self.message = message
        self.stream = stream or sys.stdout
        self.enabled = force_tty if force_tty is not None else is_tty(self.stream)
        self._spinner_index = 0

    def render(self) -> str:
        """Return the next frame text."""
        return f" [{self.get_spinner_char()}] {self.message}"

    def tick(self) -> None:
        """Draw the next frame and return the cursor to the line start."""
        if not self.enabled:
            return
        self.stream.write(self.render() + "\r")
        self.stream.flush()

    def clear(self) -> None:
        """Blank the spinner line."""
        if not self.enabled:
            return
        self.stream.write(" " * (len(self.message) + 6) + "\r")
        self.stream.flush()
