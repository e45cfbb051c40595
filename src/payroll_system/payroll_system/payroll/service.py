from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Iterable, Optional, Sequence, Union

from ..common.datetime_utils import month_bounds, now_local, parse_clock
from ..common.validators import require_max_length, require_money
from ..core.constants import MAX_NOTES_LENGTH
from ..core.enums import PayrollStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .aggregator import PeriodAggregator, PeriodFilter, PeriodSummary, round_up_50
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import Consumption, PayrollEntry, PayrollRecord, ShiftComputed, ShiftInput
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

ConsumptionLike = Union[Consumption, dict]


@dataclass(frozen=True)
class PayrollStats:
    total: int
    pending: int
    processed: int
    paid: int
    current_month: int
    paid_current_month: int


def to_consumptions(items: Optional[Iterable[ConsumptionLike]]) -> tuple[Consumption, ...]:
    """Accept Consumption objects or ``{"amount", "description"}`` dicts."""
    out = []
    for item in items or ():
        if isinstance(item, Consumption):
            out.append(replace(item, amount=require_money(item.amount, "Consumption amount")))
            continue
        if not isinstance(item, dict):
            raise ValidationError("Each consumption must be an object with amount and description")
        out.append(
            Consumption(
                amount=require_money(item.get("amount"), "Consumption amount"),
                description=str(item.get("description") or "").strip(),
            )
        )
    return tuple(out)


class PayrollService:
    """Payroll records: create/edit/delete, display and the fortnight payment flow.

    All money figures come from the calculator; nothing here recomputes them.
    When ``freeze_rate_at_creation`` is off, the employee's current hourly rate
    is read on every computation; when on, the rate at creation is stored on
    the record and reused.
    """

    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        aggregator: Optional[PeriodAggregator] = None,
        freeze_rate_at_creation: bool = False,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()
        self._aggregator = aggregator or PeriodAggregator()
        self._freeze_rate = bool(freeze_rate_at_creation)

    def _employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def _rate_for(self, record: PayrollRecord, employee: Employee) -> float:
        if self._freeze_rate and record.hourly_rate is not None:
            return record.hourly_rate
        return employee.hourly_rate

    def _compute(self, record: PayrollRecord, employee: Employee) -> ShiftComputed:
        return self._calculator.compute_shift(
            ShiftInput(
                employee_id=record.employee_id,
                hourly_rate=self._rate_for(record, employee),
                work_date=record.work_date,
                start_time=record.start_time,
                end_time=record.end_time,
                consumptions=record.consumptions,
                advance_on_pay=record.advance_on_pay,
                prior_debt_owed_to_employee=record.prior_debt_owed_to_employee,
                discrepancy=record.discrepancy,
                status=record.status,
            )
        )

    def _to_entry(self, record: PayrollRecord, employee: Employee) -> PayrollEntry:
        return PayrollEntry(
            record_id=record.record_id,
            employee_id=record.employee_id,
            employee_name=employee.full_name,
            work_date=record.work_date,
            start_time=record.start_time,
            end_time=record.end_time,
            status=record.status,
            hourly_rate=self._rate_for(record, employee),
            computed=self._compute(record, employee),
            consumptions=record.consumptions,
            advance_on_pay=record.advance_on_pay,
            prior_debt_owed_to_employee=record.prior_debt_owed_to_employee,
            discrepancy=record.discrepancy,
            notes=record.notes,
        )

    def _to_entries(self, records: Sequence[PayrollRecord]) -> list[PayrollEntry]:
        cache: dict[int, Employee] = {}
        entries = []
        for r in records:
            if r.employee_id not in cache:
                cache[r.employee_id] = self._employee(r.employee_id)
            entries.append(self._to_entry(r, cache[r.employee_id]))
        return entries

    def _draft(
        self,
        *,
        employee_id: int,
        work_date: date,
        start_time,
        end_time,
        consumptions: Optional[Iterable[ConsumptionLike]],
        advance_on_pay,
        prior_debt_owed_to_employee,
        discrepancy,
        notes: Optional[str],
        processed_by: Optional[int] = None,
    ) -> PayrollRecord:
        notes = str(notes).strip() if notes else None
        require_max_length(notes, "Notes", MAX_NOTES_LENGTH)
        return PayrollRecord(
            record_id=0,
            employee_id=int(employee_id),
            work_date=work_date,
            start_time=parse_clock(start_time),
            end_time=parse_clock(end_time),
            consumptions=to_consumptions(consumptions),
            advance_on_pay=require_money(advance_on_pay, "Advance on pay"),
            prior_debt_owed_to_employee=require_money(prior_debt_owed_to_employee, "Debt owed to employee"),
            discrepancy=require_money(discrepancy, "Discrepancy"),
            notes=notes,
            processed_by=processed_by,
        )

    def preview(
        self,
        *,
        employee_id: int,
        work_date: date,
        start_time,
        end_time,
        consumptions: Optional[Iterable[ConsumptionLike]] = None,
        advance_on_pay=0,
        prior_debt_owed_to_employee=0,
        discrepancy=0,
    ) -> ShiftComputed:
        """Figures a create/edit form would show, without saving anything."""
        employee = self._employee(employee_id)
        draft = self._draft(
            employee_id=employee_id,
            work_date=work_date,
            start_time=start_time,
            end_time=end_time,
            consumptions=consumptions,
            advance_on_pay=advance_on_pay,
            prior_debt_owed_to_employee=prior_debt_owed_to_employee,
            discrepancy=discrepancy,
            notes=None,
        )
        return self._compute(draft, employee)

    def create_record(
        self,
        *,
        employee_id: int,
        work_date: date,
        start_time,
        end_time,
        consumptions: Optional[Iterable[ConsumptionLike]] = None,
        advance_on_pay=0,
        prior_debt_owed_to_employee=0,
        discrepancy=0,
        notes: Optional[str] = None,
        processed_by: Optional[int] = None,
    ) -> PayrollEntry:
        employee = self._employee(employee_id)
        draft = self._draft(
            employee_id=employee_id,
            work_date=work_date,
            start_time=start_time,
            end_time=end_time,
            consumptions=consumptions,
            advance_on_pay=advance_on_pay,
            prior_debt_owed_to_employee=prior_debt_owed_to_employee,
            discrepancy=discrepancy,
            notes=notes,
            processed_by=processed_by,
        )
        if self._freeze_rate:
            draft = replace(draft, hourly_rate=require_money(employee.hourly_rate, "Hourly rate"))

        computed = self._compute(draft, employee)
        record_id = self._payrolls.create(draft, computed)
        logger.info(
            "Payroll record %s created for employee %s on %s (net %.2f)",
            record_id, employee.employee_id, draft.work_date, computed.net_pay,
        )
        return self._to_entry(replace(draft, record_id=record_id), employee)

    def update_record(
        self,
        record_id: int,
        *,
        work_date: Optional[date] = None,
        start_time=None,
        end_time=None,
        consumptions: Optional[Iterable[ConsumptionLike]] = None,
        advance_on_pay=None,
        prior_debt_owed_to_employee=None,
        discrepancy=None,
        status: Optional[Union[PayrollStatus, str]] = None,
        notes: Optional[str] = None,
    ) -> PayrollEntry:
        """Partial update: ``None`` keeps the stored value. The computed figures
        are always rebuilt from the merged inputs."""
        current = self._payrolls.get_by_id(int(record_id))
        if not current:
            raise NotFoundError("Payroll record not found")
        employee = self._employee(current.employee_id)

        merged = self._draft(
            employee_id=current.employee_id,
            work_date=work_date if work_date is not None else current.work_date,
            start_time=start_time if start_time is not None else current.start_time,
            end_time=end_time if end_time is not None else current.end_time,
            consumptions=consumptions if consumptions is not None else current.consumptions,
            advance_on_pay=advance_on_pay if advance_on_pay is not None else current.advance_on_pay,
            prior_debt_owed_to_employee=(
                prior_debt_owed_to_employee
                if prior_debt_owed_to_employee is not None
                else current.prior_debt_owed_to_employee
            ),
            discrepancy=discrepancy if discrepancy is not None else current.discrepancy,
            notes=notes if notes is not None else current.notes,
            processed_by=current.processed_by,
        )
        if status is not None:
            try:
                status = PayrollStatus(status)
            except ValueError:
                raise ValidationError(f"Invalid status: {status}") from None

        updated = replace(
            merged,
            record_id=current.record_id,
            status=status or current.status,
            hourly_rate=current.hourly_rate,
            created_at=current.created_at,
        )
        computed = self._compute(updated, employee)
        self._payrolls.update(updated, computed)
        logger.info("Payroll record %s updated (status=%s, net %.2f)", updated.record_id, updated.status.value, computed.net_pay)
        return self._to_entry(updated, employee)

    def delete_record(self, record_id: int) -> None:
        current = self._payrolls.get_by_id(int(record_id))
        if not current:
            raise NotFoundError("Payroll record not found")
        if current.status != PayrollStatus.PENDING:
            raise ValidationError("Only PENDING payroll records can be deleted")
        self._payrolls.delete(current.record_id)
        logger.info("Payroll record %s deleted", current.record_id)

    def confirm_payment(self, *, year: int, month: int, employee_id: int, fortnight_key: str) -> list[int]:
        """Mark every record of one fortnight as PAID; returns the affected ids."""
        summary = self.month_summary(year=year, month=month, employee_id=employee_id)
        record_ids = self._aggregator.select_for_payment(summary, fortnight_key)
        if record_ids:
            self._payrolls.mark_paid(record_ids)
        logger.info(
            "Payment confirmed for employee %s, fortnight %s: %d record(s)",
            employee_id, fortnight_key, len(record_ids),
        )
        return record_ids

    def get_record(self, record_id: int) -> PayrollEntry:
        record = self._payrolls.get_by_id(int(record_id))
        if not record:
            raise NotFoundError("Payroll record not found")
        return self._to_entry(record, self._employee(record.employee_id))

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[Union[PayrollStatus, str]] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[PayrollEntry]:
        if status is not None:
            try:
                status = PayrollStatus(status)
            except ValueError:
                raise ValidationError(f"Invalid status: {status}") from None
        records = self._payrolls.list_records(employee_id=employee_id, status=status, start_date=start, end_date=end)
        return self._to_entries(records)

    def month_summary(self, *, year: int, month: int, employee_id: Optional[int] = None) -> PeriodSummary:
        if not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")
        start, end = month_bounds(year, month)
        entries = self.list_records(employee_id=employee_id, start=start, end=end)
        return self._aggregator.aggregate(entries, PeriodFilter(employee_id=employee_id, year=year, month=month))

    def stats(self, *, employee_id: Optional[int] = None, today: Optional[date] = None) -> PayrollStats:
        today = today or now_local().date()
        entries = self.list_records(employee_id=employee_id)
        month_start = today.replace(day=1)
        this_month = [e for e in entries if e.work_date >= month_start]
        return PayrollStats(
            total=len(entries),
            pending=sum(1 for e in entries if e.status == PayrollStatus.PENDING),
            processed=sum(1 for e in entries if e.status == PayrollStatus.PROCESSED),
            paid=sum(1 for e in entries if e.status == PayrollStatus.PAID),
            current_month=len(this_month),
            paid_current_month=sum(round_up_50(e.net_pay) for e in this_month if e.status == PayrollStatus.PAID),
        )
