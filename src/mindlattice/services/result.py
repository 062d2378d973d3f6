"""ServiceResult and ServiceError — what every service method returns.

A failed result always carries an error; its ``code`` is either a
:class:`~mindlattice.domain.errors.LatticeError` code raised by the store
or one of the service-level codes (``LOAD_PARTIAL``, ``INVALID_FORMAT``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

from pydantic import BaseModel, Field, model_validator

if TYPE_CHECKING:
    from mindlattice.domain.errors import LatticeError


class ServiceError(BaseModel):
    """Error code, message and structured detail of a failed operation."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: LatticeError) -> ServiceError:
        return cls(code=exc.code, message=str(exc), detail=exc.detail)


class ServiceResult(BaseModel):
    """Outcome of one lattice operation.

    ``op`` names the operation (``"pin_anchor"``, ``"traverse"``...) and
    picks the renderer in human output. ``data`` is the payload, also on
    partial failures such as an import with rejected entries. ``meta``
    holds the telemetry tree under ``--verbose``.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @model_validator(mode="after")
    def _failure_has_error(self) -> Self:
        if not self.ok and self.error is None:
            msg = f"failed result for {self.op!r} needs an error"
            raise ValueError(msg)
        return self

    @classmethod
    def failure(
        cls,
        op: str,
        code: str,
        message: str,
        *,
        data: dict[str, Any] | None = None,
        **detail: Any,
    ) -> ServiceResult:
        """Failed result with a service-level error code."""
        return cls(
            ok=False,
            op=op,
            data=data or {},
            error=ServiceError(code=code, message=message, detail=detail),
        )

    @classmethod
    def from_exception(cls, op: str, exc: LatticeError) -> ServiceResult:
        """Failed result for a store error."""
        return cls(ok=False, op=op, error=ServiceError.from_exception(exc))
