"""Lookup and parsing of validation reports.

The validation playbook writes ``validation_<timestamp>.json`` and ``.html``
pairs into the report directory. Only the newest file (by modification time)
is ever consulted.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError

from sdwan_deploy.lib.logging_config import get_logger
from sdwan_deploy.models.deployment_state import ValidationReport

logger = get_logger(__name__)

REPORT_PREFIX = "validation_"


def find_latest_report(report_dir: Path, suffix: str = ".json") -> Path | None:
    """Return the most recently modified validation report.

    Files with equal modification times resolve to the lexicographically
    greatest name.

    Args:
        report_dir: Directory the validation playbook writes into
        suffix: Report extension, ``.json`` or ``.html``

    Returns:
        Path to the newest report, or None if there is none
    """
    if not report_dir.is_dir():
        return None

    candidates = [
        path
        for path in report_dir.glob(f"{REPORT_PREFIX}*{suffix}")
        if path.is_file()
    ]
    if not candidates:
        return None
    return max(candidates, key=lambda path: (path.stat().st_mtime, path.name))


def load_report(path: Path | None) -> ValidationReport:
    """Parse a JSON validation report.

    A missing, unreadable or malformed report yields an empty report, so
    every field lookup degrades to ``"N/A"``.
    """
    if path is None:
        return ValidationReport()

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning(f"Cannot read validation report {path}: {exc}")
        return ValidationReport()

    try:
        return ValidationReport.model_validate_json(content)
    except ValidationError as exc:
        logger.warning(f"Unparseable validation report {path.name}: {exc}")
        return ValidationReport()


def load_latest_report(report_dir: Path) -> ValidationReport:
    """Parse the newest JSON report in ``report_dir``."""
    return load_report(find_latest_report(report_dir, ".json"))
