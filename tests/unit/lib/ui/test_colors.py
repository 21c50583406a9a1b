"""Unit tests for sdwan_deploy.lib.ui.colors module."""

from unittest.mock import patch

import pytest

from sdwan_deploy.lib.ui.colors import ANSIColors, colorize


@pytest.mark.unit
class TestANSIColors:
    """Tests for ANSIColors class."""

    @pytest.mark.parametrize(
        ("color", "code"),
        [
            (ANSIColors.GREEN, "\033[0;32m"),
            (ANSIColors.RED, "\033[0;31m"),
            (ANSIColors.YELLOW, "\033[1;33m"),
            (ANSIColors.BLUE, "\033[0;34m"),
            (ANSIColors.CYAN, "\033[0;36m"),
            (ANSIColors.RESET, "\033[0m"),
        ],
    )
    def test_escape_codes(self, color: str, code: str) -> None:
        assert color == code


@pytest.mark.unit
class TestColorize:
    """Tests for colorize function."""

    def test_colorize_applies_color_when_tty(self) -> None:
        """Test colorize wraps text with color codes when force_tty=True."""
        result = colorize("test", ANSIColors.GREEN, force_tty=True)
        assert result == f"{ANSIColors.GREEN}test{ANSIColors.RESET}"

    def test_colorize_returns_plain_text_when_not_tty(self) -> None:
        result = colorize("test", ANSIColors.GREEN, force_tty=False)
        assert result == "test"

    def test_colorize_detects_tty(self) -> None:
        """Without force_tty the stdout TTY check decides."""
        with patch("sdwan_deploy.lib.ui.colors.is_tty", return_value=True):
            assert colorize("[✗]", ANSIColors.RED) == f"{ANSIColors.RED}[✗]{ANSIColors.RESET}"
        with patch("sdwan_deploy.lib.ui.colors.is_tty", return_value=False):
            assert colorize("[✗]", ANSIColors.RED) == "[✗]"
