"""
Receipt model — the result contract of every collaborator operation.

Collaborators (repository loading, download, transaction execution)
report expected failures in a Receipt instead of raising. The pipeline
reads ``ok`` / ``error`` and decides whether the run can continue.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class Receipt(BaseModel):
    """Outcome of one collaborator call."""

    operation: str                    # "load_repos", "download", "apply", ...
    status: Literal["ok", "failed"] = "ok"
    output: str = ""
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, operation: str, output: str = "", **kwargs: Any) -> Receipt:
        """Create a success receipt."""
        return cls(operation=operation, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, operation: str, error: str, **kwargs: Any) -> Receipt:
        """Create a failure receipt."""
        return cls(operation=operation, status="failed", error=error, **kwargs)
