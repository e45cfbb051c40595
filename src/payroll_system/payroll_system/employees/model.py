from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_HOURLY_RATE


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee and the hourly rate currently in force."""

    employee_id: int
    full_name: str
    hourly_rate: float = DEFAULT_HOURLY_RATE
    is_active: bool = True
