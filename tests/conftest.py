from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Iterable, Optional

import pytest

from src.payroll_system.payroll_system.core.enums import PayrollStatus
from src.payroll_system.payroll_system.employees.model import Employee
from src.payroll_system.payroll_system.employees.service import EmployeeService
from src.payroll_system.payroll_system.payroll.model import PayrollRecord, ShiftComputed
from src.payroll_system.payroll_system.payroll.service import PayrollService


class InMemoryEmployees:
    def __init__(self, employees: Iterable[Employee] = ()):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._by_id.get(employee_id)

    def list_active(self):
        return sorted((e for e in self._by_id.values() if e.is_active), key=lambda e: e.full_name)

    def update_hourly_rate(self, employee_id: int, hourly_rate: float) -> bool:
        if employee_id not in self._by_id:
            return False
        self._by_id[employee_id] = replace(self._by_id[employee_id], hourly_rate=hourly_rate)
        return True

    def deactivate(self, employee_id: int) -> bool:
        if employee_id not in self._by_id:
            return False
        self._by_id[employee_id] = replace(self._by_id[employee_id], is_active=False)
        return True


class InMemoryPayrolls:
    """Stores money fields rounded to ``money_decimals`` when set, like DECIMAL columns."""

    def __init__(self, money_decimals: Optional[int] = None):
        self._money_decimals = money_decimals
        self._rows: dict[int, PayrollRecord] = {}
        self.computed: dict[int, ShiftComputed] = {}
        self._id = 0

    def _stored(self, record: PayrollRecord) -> PayrollRecord:
        if self._money_decimals is None:
            return record

        def cents(v):
            return None if v is None else round(v, self._money_decimals)

        return replace(
            record,
            advance_on_pay=cents(record.advance_on_pay),
            prior_debt_owed_to_employee=cents(record.prior_debt_owed_to_employee),
            discrepancy=cents(record.discrepancy),
            hourly_rate=cents(record.hourly_rate),
        )

    def get_by_id(self, record_id: int) -> Optional[PayrollRecord]:
        return self._rows.get(record_id)

    def list_records(self, *, employee_id=None, status=None, start_date=None, end_date=None):
        items = [
            r
            for r in self._rows.values()
            if (employee_id is None or r.employee_id == employee_id)
            and (status is None or r.status == status)
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
        ]
        items.sort(key=lambda r: (r.work_date, r.record_id), reverse=True)
        return items

    def create(self, record: PayrollRecord, computed: ShiftComputed) -> int:
        self._id += 1
        self._rows[self._id] = self._stored(replace(record, record_id=self._id))
        self.computed[self._id] = computed
        return self._id

    def update(self, record: PayrollRecord, computed: ShiftComputed) -> bool:
        if record.record_id not in self._rows:
            return False
        self._rows[record.record_id] = self._stored(record)
        self.computed[record.record_id] = computed
        return True

    def delete(self, record_id: int) -> bool:
        self.computed.pop(record_id, None)
        return self._rows.pop(record_id, None) is not None

    def mark_paid(self, record_ids) -> int:
        count = 0
        for record_id in record_ids:
            if record_id in self._rows:
                self._rows[record_id] = replace(self._rows[record_id], status=PayrollStatus.PAID)
                count += 1
        return count


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            Employee(employee_id=1, full_name="Juan Perez", hourly_rate=10000),
            Employee(employee_id=2, full_name="ana Lopez", hourly_rate=6500),
        ]
    )


@pytest.fixture
def payrolls() -> InMemoryPayrolls:
    return InMemoryPayrolls()


@pytest.fixture
def cents_payrolls() -> InMemoryPayrolls:
    return InMemoryPayrolls(money_decimals=2)


@pytest.fixture
def service(payrolls, employees) -> PayrollService:
    return PayrollService(payrolls, employees)


@pytest.fixture
def employee_service(employees) -> EmployeeService:
    return EmployeeService(employees)


@pytest.fixture
def fixed_today() -> date:
    return date(2025, 3, 20)
