"""ServiceResult — the tagged outcome returned by ``ServiceBase.attempt``.

INVARIANT: ``ok`` is True exactly when ``errors`` is empty.
Structured errors never raise through ``attempt``; only unexpected
exceptions from business logic propagate.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from servicekit.services.errors import STATUS_KEY


class ServiceResult(BaseModel):
    """Outcome of one operation invocation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"CreateUser"``).
        result: Value produced by business logic; None on failure.
        errors: Structured error map, empty on success.
        meta: Optional metadata (timing).
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    ok: bool
    op: str
    result: Any = None
    errors: dict[str, Any] = Field(default_factory=dict)
    meta: dict[str, Any] | None = None

    @property
    def status(self) -> int | None:
        return self.errors.get(STATUS_KEY)
