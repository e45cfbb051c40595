from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Employee]:
        raise NotImplementedError

    def update_hourly_rate(self, employee_id: int, hourly_rate: float) -> bool:
        raise NotImplementedError

    def deactivate(self, employee_id: int) -> bool:
        raise NotImplementedError
