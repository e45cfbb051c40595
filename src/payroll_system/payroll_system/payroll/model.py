from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class Consumption:
    """A charge the employee took against their own pay (food, drinks...)."""

    amount: float
    description: str


@dataclass(frozen=True)
class ShiftInput:
    """Raw inputs of one work day, with the hourly rate resolved by the caller."""

    employee_id: int
    hourly_rate: float
    work_date: date
    start_time: time
    end_time: time
    consumptions: tuple[Consumption, ...] = ()
    advance_on_pay: float = 0.0
    prior_debt_owed_to_employee: float = 0.0
    discrepancy: float = 0.0
    status: PayrollStatus = PayrollStatus.PENDING


@dataclass(frozen=True)
class ShiftComputed:
    hours_worked: int
    minutes_worked: int
    gross_pay: float
    consumption_subtotal: float
    consumption_discount: float
    consumption_net: float
    net_pay: float

    @property
    def total_minutes(self) -> int:
        return self.hours_worked * 60 + self.minutes_worked


@dataclass(frozen=True)
class PayrollRecord:
    """Persisted shift: raw inputs plus the frozen hourly rate, if any."""

    record_id: int
    employee_id: int
    work_date: date
    start_time: time
    end_time: time
    consumptions: tuple[Consumption, ...] = ()
    advance_on_pay: float = 0.0
    prior_debt_owed_to_employee: float = 0.0
    discrepancy: float = 0.0
    status: PayrollStatus = PayrollStatus.PENDING
    notes: Optional[str] = None
    hourly_rate: Optional[float] = None
    processed_by: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollEntry:
    """Read-model: a record together with its freshly computed figures."""

    record_id: int
    employee_id: int
    employee_name: str
    work_date: date
    start_time: time
    end_time: time
    status: PayrollStatus
    hourly_rate: float
    computed: ShiftComputed
    consumptions: tuple[Consumption, ...] = field(default_factory=tuple)
    advance_on_pay: float = 0.0
    prior_debt_owed_to_employee: float = 0.0
    discrepancy: float = 0.0
    notes: Optional[str] = None

    @property
    def net_pay(self) -> float:
        return self.computed.net_pay
