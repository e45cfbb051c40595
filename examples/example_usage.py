"""Example: compute a shift and a month summary without Flask or MySQL."""

from datetime import date, time

from src.payroll_system.payroll_system.payroll.aggregator import PeriodFilter, aggregate
from src.payroll_system.payroll_system.payroll.calculator.standard_calculator import compute_shift
from src.payroll_system.payroll_system.payroll.model import Consumption, PayrollEntry, ShiftInput


def main():
    shift = ShiftInput(
        employee_id=1,
        hourly_rate=6500,
        work_date=date(2025, 3, 14),
        start_time=time(22, 0),
        end_time=time(2, 0),
        consumptions=(Consumption(amount=12000, description="Almuerzo"),),
        advance_on_pay=5000,
    )
    computed = compute_shift(shift)
    print(computed)

    entry = PayrollEntry(
        record_id=1,
        employee_id=1,
        employee_name="Juan Perez",
        work_date=shift.work_date,
        start_time=shift.start_time,
        end_time=shift.end_time,
        status=shift.status,
        hourly_rate=shift.hourly_rate,
        computed=computed,
    )
    summary = aggregate([entry], PeriodFilter(year=2025, month=3))
    for month in summary.months:
        for fortnight in month.fortnights:
            print(fortnight.key, fortnight.total, fortnight.worked_time)


if __name__ == "__main__":
    main()
