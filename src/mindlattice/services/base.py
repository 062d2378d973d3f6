"""BaseService — foundation for all mindlattice services.

Every service receives a :class:`Lattice` at construction time. Store
failures (:class:`LatticeError`) are caught at this boundary and turned
into failed ``ServiceResult`` objects; they never escape a service.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mindlattice.services.result import ServiceResult

if TYPE_CHECKING:
    from mindlattice.domain.errors import LatticeError
    from mindlattice.infrastructure.workspace import Lattice
    from mindlattice.lattice.store import LatticeStore

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class CreateService(BaseService):
            def pin_anchor(self, label: str, ...) -> ServiceResult:
                with self._lattice.mutation() as store:
                    ...
    """

    def __init__(self, lattice: Lattice) -> None:
        self._lattice = lattice

    @property
    def _store(self) -> LatticeStore:
        return self._lattice.store

    @staticmethod
    def _failure(op: str, exc: LatticeError) -> ServiceResult:
        """Wrap a store failure into a failed result."""
        logger.debug("%s failed: %s (%s)", op, exc, exc.code)
        return ServiceResult.from_exception(op, exc)

    @staticmethod
    def _not_found(op: str, message: str, **detail: Any) -> ServiceResult:
        return ServiceResult.failure(op, "NOT_FOUND", message, **detail)
