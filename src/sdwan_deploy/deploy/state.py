"""Deployment state tracking helpers.

The state file holds exactly one :class:`DeploymentState` record. It is
rewritten after every terminal phase and removed by a successful cleanup.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from sdwan_deploy.lib.errors import DeploymentError
from sdwan_deploy.lib.logging_config import get_logger
from sdwan_deploy.models.deployment_state import DeploymentState, DeploymentStatus

logger = get_logger(__name__)

UNKNOWN_STATE = "unknown"


def load_state(state_path: Path) -> DeploymentState | None:
    """Load the current deployment state from disk.

    Returns:
        The stored record, or None if no state file exists

    Raises:
        DeploymentError: If the file cannot be read or is not a valid record
    """
    if not state_path.exists():
        return None

    try:
        content = state_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DeploymentError(
            operation="state",
            message=f"Failed to read deployment state at {state_path}: {exc}",
        ) from exc

    if not content.strip():
        return None

    try:
        return DeploymentState.model_validate_json(content)
    except ValidationError as exc:
        raise DeploymentError(
            operation="state",
            message=f"Invalid deployment state format in {state_path}: {exc}",
        ) from exc


def save_state(state_path: Path, state: DeploymentState) -> None:
    """Persist deployment state to disk, replacing any previous record."""
    try:
        state_path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(state.model_dump(mode="json"), indent=2)
        state_path.write_text(payload + "\n", encoding="utf-8")
    except OSError as exc:
        raise DeploymentError(
            operation="state",
            message=f"Failed to write deployment state to {state_path}: {exc}",
        ) from exc


def record_state(
    state_path: Path,
    status: DeploymentStatus,
    deployment_id: str,
    data: dict[str, Any] | None = None,
) -> DeploymentState:
    """Build a fresh record stamped with the current time and persist it.

    Args:
        state_path: Location of the state file
        status: Lifecycle label to record
        deployment_id: Identifier of the current run
        data: Phase-specific payload

    Returns:
        The record that was written
    """
    state = DeploymentState(
        timestamp=datetime.now(timezone.utc).astimezone(),
        state=status,
        deployment_id=deployment_id,
        data=data or {},
    )
    save_state(state_path, state)
    logger.debug(f"State saved: {status.value}")
    return state


def clear_state(state_path: Path) -> None:
    """Remove the state file if present."""
    try:
        state_path.unlink(missing_ok=True)
    except OSError as exc:
        raise DeploymentError(
            operation="state",
            message=f"Failed to remove deployment state at {state_path}: {exc}",
        ) from exc


def current_state_label(state_path: Path) -> str:
    """Return the stored state label, or ``"unknown"``.

    Missing and unreadable state files both read as unknown; the state file
    is advisory and must never stop a run.
    """
    try:
        state = load_state(state_path)
    except DeploymentError as exc:
        logger.debug(f"Ignoring unreadable state file: {exc.message}")
        return UNKNOWN_STATE
    return state.state.value if state else UNKNOWN_STATE
