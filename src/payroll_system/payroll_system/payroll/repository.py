from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import PayrollRecord, ShiftComputed


class PayrollRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[PayrollRecord]:
        """Records ordered by work_date DESC, then newest first."""

        raise NotImplementedError

    def create(self, record: PayrollRecord, computed: ShiftComputed) -> int:
        """Insert ``record`` (its record_id is ignored) and return the new id."""

        raise NotImplementedError

    def update(self, record: PayrollRecord, computed: ShiftComputed) -> bool:
        raise NotImplementedError

    def delete(self, record_id: int) -> bool:
        raise NotImplementedError

    def mark_paid(self, record_ids: Iterable[int]) -> int:
        raise NotImplementedError
