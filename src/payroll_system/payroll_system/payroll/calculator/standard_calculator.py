from __future__ import annotations

from typing import Iterable

from ...common.datetime_utils import parse_clock
from ...common.validators import require_non_negative
from ...core.constants import CONSUMPTION_DISCOUNT_RATE, MAX_CONSUMPTION_DESCRIPTION, MINUTES_PER_DAY
from ...core.exceptions import InvalidConsumptionError, InvalidShiftError
from ..model import Consumption, ShiftComputed, ShiftInput
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: worked time x hourly rate, minus discounted consumptions,
    advance and discrepancy, plus what the business owes the employee.

    The net pay expression is evaluated in a fixed order so the float result
    is identical wherever a shift is computed.
    """

    def worked_minutes(self, start_time, end_time) -> int:
        start = parse_clock(start_time)
        end = parse_clock(end_time)

        start_minutes = start.hour * 60 + start.minute
        end_minutes = end.hour * 60 + end.minute
        if end_minutes < start_minutes:
            # Crosses midnight into the next day.
            end_minutes += MINUTES_PER_DAY

        total = end_minutes - start_minutes
        if total <= 0:
            if end.hour == 0 and end.minute == 0:
                return MINUTES_PER_DAY - start_minutes
            raise InvalidShiftError("End time must be after start time")
        return total

    def consumption_totals(self, consumptions: Iterable[Consumption]) -> tuple[float, float, float]:
        subtotal = 0.0
        for item in consumptions:
            _check_description(item.description)
            subtotal += require_non_negative(item.amount, "Consumption amount")
        discount = subtotal * CONSUMPTION_DISCOUNT_RATE
        return subtotal, discount, subtotal - discount

    def compute_shift(self, shift: ShiftInput) -> ShiftComputed:
        hourly_rate = require_non_negative(shift.hourly_rate, "Hourly rate")
        advance = require_non_negative(shift.advance_on_pay, "Advance on pay")
        debt = require_non_negative(shift.prior_debt_owed_to_employee, "Debt owed to employee")
        discrepancy = require_non_negative(shift.discrepancy, "Discrepancy")

        total = self.worked_minutes(shift.start_time, shift.end_time)
        hours, minutes = divmod(total, 60)
        gross_pay = (hours + minutes / 60) * hourly_rate

        subtotal, discount, consumption_net = self.consumption_totals(shift.consumptions)

        net_pay = gross_pay - consumption_net - advance - discrepancy + debt

        return ShiftComputed(
            hours_worked=hours,
            minutes_worked=minutes,
            gross_pay=gross_pay,
            consumption_subtotal=subtotal,
            consumption_discount=discount,
            consumption_net=consumption_net,
            net_pay=net_pay,
        )


def _check_description(description: str) -> None:
    if not description or not str(description).strip():
        raise InvalidConsumptionError("Consumption description is required")
    if len(str(description).strip()) > MAX_CONSUMPTION_DESCRIPTION:
        raise InvalidConsumptionError(
            f"Consumption description cannot exceed {MAX_CONSUMPTION_DESCRIPTION} characters"
        )


_default = StandardPayrollCalculator()


def compute_shift(shift: ShiftInput) -> ShiftComputed:
    """Single entry point used for creation, edit preview and display."""
    return _default.compute_shift(shift)
