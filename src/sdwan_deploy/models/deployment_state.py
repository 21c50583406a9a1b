"""Deployment state and validation report models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)

NOT_AVAILABLE = "N/A"


class DeploymentStatus(str, Enum):
    """Lifecycle label stored in the state file."""

    DEPLOYED = "deployed"
    VALIDATED = "validated"
    FAILED = "failed"


class DeploymentState(BaseModel):
    """Single current-state record persisted between runs."""

    model_config = ConfigDict(extra="forbid")

    timestamp: datetime = Field(..., description="When the record was written")
    state: DeploymentStatus = Field(..., description="Deployment lifecycle label")
    deployment_id: str = Field(..., description="Identifier of the writing run")
    data: dict[str, Any] = Field(
        default_factory=dict, description="Phase-specific payload"
    )


class ValidationReport(BaseModel):
    """Typed view of a ``validation_*.json`` report.

    Every field is optional and read independently: a field of the wrong
    shape is treated as absent, and lookups of absent fields yield ``"N/A"``.
    """

    model_config = ConfigDict(extra="allow")

    status: str | None = None
    health_score: int | float | str | None = None
    results: dict[str, Any] | None = None

    @field_validator("status", "health_score", "results", mode="wrap")
    @classmethod
    def drop_malformed(
        cls, value: Any, handler: ValidatorFunctionWrapHandler
    ) -> Any:
        """Replace a value that does not fit its field with None."""
        try:
            return handler(value)
        except ValidationError:
            return None

    def lookup(self, dotted: str) -> Any:
        """Return a value addressed as ``status`` or ``results.phase3.name``.

        Args:
            dotted: Dot-separated path into the report

        Returns:
            The value, or ``"N/A"`` if any segment is missing or null
        """
        parts = dotted.split(".")
        head, rest = parts[0], parts[1:]
        value: Any = getattr(self, head, None)
        if value is None and self.model_extra:
            value = self.model_extra.get(head)
        for part in rest:
            if not isinstance(value, dict):
                return NOT_AVAILABLE
            value = value.get(part)
        return NOT_AVAILABLE if value is None else value

    @property
    def succeeded(self) -> bool:
        return self.status == "SUCCESS"
