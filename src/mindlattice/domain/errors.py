"""Lattice failure taxonomy.

Every write-path failure raised by the store is a :class:`LatticeError`
subclass carrying a stable ``code``. The service layer maps the code
straight into ``ServiceError.code``; nothing in the core retries.
"""

from __future__ import annotations

from typing import Any


class LatticeError(Exception):
    """Base class for all lattice failures."""

    code = "LATTICE_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.detail: dict[str, Any] = detail


class InvalidArgumentError(LatticeError):
    """Malformed or empty identifier or argument."""

    code = "INVALID_ARGUMENT"


class NotFoundError(LatticeError):
    """Referenced anchor or link is absent."""

    code = "NOT_FOUND"


class DuplicateIdError(LatticeError):
    """Id collision on create."""

    code = "DUPLICATE_ID"


class CapacityExceededError(LatticeError):
    """The store already holds its configured number of anchors."""

    code = "CAPACITY_EXCEEDED"


class AlreadyStoredError(LatticeError):
    """Recall was already stored for this anchor."""

    code = "ALREADY_STORED"
