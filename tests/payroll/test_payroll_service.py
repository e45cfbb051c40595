from __future__ import annotations

from datetime import date, time

import pytest

from src.payroll_system.payroll_system.core.enums import PayrollStatus
from src.payroll_system.payroll_system.core.exceptions import (
    InvalidAmountError,
    InvalidShiftError,
    NotFoundError,
    ValidationError,
)
from src.payroll_system.payroll_system.payroll.aggregator import round_up_50
from src.payroll_system.payroll_system.payroll.service import PayrollService


def _create(service, **overrides):
    data = dict(
        employee_id=1,
        work_date=date(2025, 3, 10),
        start_time="08:00",
        end_time="16:00",
        consumptions=[{"amount": 15000, "description": "Almuerzo"}, {"amount": 5000, "description": "Gaseosa"}],
        advance_on_pay=5000,
        prior_debt_owed_to_employee=2000,
    )
    data.update(overrides)
    return service.create_record(**data)


def test_create_record_computes_and_persists(service, payrolls):
    entry = _create(service)

    assert entry.record_id == 1
    assert entry.employee_name == "Juan Perez"
    assert entry.status == PayrollStatus.PENDING
    assert entry.start_time == time(8, 0)
    assert entry.net_pay == 60000
    assert payrolls.computed[1].net_pay == 60000


def test_create_preview_and_display_agree(service):
    preview = service.preview(
        employee_id=1,
        work_date=date(2025, 3, 10),
        start_time="07:13",
        end_time="18:47",
        consumptions=[{"amount": 1234.56, "description": "Menu"}],
        advance_on_pay=321.5,
        discrepancy=17.3,
    )
    created = _create(
        service,
        start_time="07:13",
        end_time="18:47",
        consumptions=[{"amount": 1234.56, "description": "Menu"}],
        advance_on_pay=321.5,
        prior_debt_owed_to_employee=0,
        discrepancy=17.3,
    )
    shown = service.get_record(created.record_id)

    assert preview == created.computed == shown.computed


def test_preview_does_not_persist(service, payrolls):
    service.preview(employee_id=1, work_date=date(2025, 3, 10), start_time="08:00", end_time="12:00")
    assert payrolls.list_records() == []


def test_create_for_unknown_employee(service):
    with pytest.raises(NotFoundError):
        _create(service, employee_id=99)


def test_create_rejects_bad_input(service):
    with pytest.raises(InvalidShiftError):
        _create(service, start_time="10:00", end_time="10:00")
    with pytest.raises(InvalidAmountError):
        _create(service, consumptions=[{"amount": -1, "description": "x"}])
    with pytest.raises(ValidationError):
        _create(service, notes="x" * 501)
    with pytest.raises(ValidationError):
        _create(service, consumptions=["not-an-object"])


def test_live_rate_is_used_on_display(service, employees):
    entry = _create(service, consumptions=[], advance_on_pay=0, prior_debt_owed_to_employee=0)
    assert entry.computed.gross_pay == 80000

    employees.update_hourly_rate(1, 12000)

    assert service.get_record(entry.record_id).computed.gross_pay == 96000


def test_frozen_rate_survives_rate_changes(payrolls, employees):
    service = PayrollService(payrolls, employees, freeze_rate_at_creation=True)
    entry = _create(service, consumptions=[], advance_on_pay=0, prior_debt_owed_to_employee=0)

    employees.update_hourly_rate(1, 12000)
    updated = service.update_record(entry.record_id, end_time="17:00")

    assert payrolls.get_by_id(entry.record_id).hourly_rate == 10000
    assert updated.computed.gross_pay == 90000
    assert service.get_record(entry.record_id).hourly_rate == 10000


def test_update_recomputes_and_keeps_untouched_fields(service, payrolls):
    entry = _create(service)

    updated = service.update_record(entry.record_id, end_time="17:00")

    assert (updated.computed.hours_worked, updated.computed.minutes_worked) == (9, 0)
    assert updated.net_pay == 70000
    assert updated.advance_on_pay == 5000
    assert len(updated.consumptions) == 2
    assert payrolls.computed[entry.record_id].net_pay == 70000


def test_update_status_only(service):
    entry = _create(service)

    updated = service.update_record(entry.record_id, status="PROCESSED")

    assert updated.status == PayrollStatus.PROCESSED
    assert updated.net_pay == entry.net_pay


def test_update_rejects_unknown_status_and_record(service):
    entry = _create(service)
    with pytest.raises(ValidationError):
        service.update_record(entry.record_id, status="ARCHIVED")
    with pytest.raises(NotFoundError):
        service.update_record(404, status="PAID")


def test_only_pending_records_can_be_deleted(service, payrolls):
    pending = _create(service)
    paid = _create(service, work_date=date(2025, 3, 11))
    service.update_record(paid.record_id, status=PayrollStatus.PAID)

    service.delete_record(pending.record_id)

    assert payrolls.get_by_id(pending.record_id) is None
    with pytest.raises(ValidationError):
        service.delete_record(paid.record_id)
    with pytest.raises(NotFoundError):
        service.delete_record(pending.record_id)


def test_list_records_filters_by_status(service):
    a = _create(service, work_date=date(2025, 3, 1))
    _create(service, work_date=date(2025, 3, 2))
    service.update_record(a.record_id, status="PAID")

    paid = service.list_records(status="PAID")

    assert [e.record_id for e in paid] == [a.record_id]
    with pytest.raises(ValidationError):
        service.list_records(status="nope")


def test_month_summary_for_one_employee(service):
    _create(service, work_date=date(2025, 3, 3), consumptions=[], advance_on_pay=0, prior_debt_owed_to_employee=0, end_time="08:01")
    _create(service, work_date=date(2025, 3, 20))
    _create(service, employee_id=2, work_date=date(2025, 3, 4))
    _create(service, work_date=date(2025, 4, 1))

    summary = service.month_summary(year=2025, month=3, employee_id=1)

    assert [m.key for m in summary.months] == ["2025-03"]
    month = summary.months[0]
    # 1 minute at 10000/h is 166.67, rounded up to 200 on its own.
    assert [f.total for f in month.fortnights] == [200, 60000]
    assert month.total == 60200


def test_month_summary_without_records_is_empty(service):
    summary = service.month_summary(year=2025, month=7, employee_id=1)
    assert summary.is_empty
    assert summary.total == 0


def test_month_summary_rejects_bad_month(service):
    with pytest.raises(ValidationError):
        service.month_summary(year=2025, month=13)


def test_confirm_payment_marks_fortnight_paid(service, payrolls):
    first_a = _create(service, work_date=date(2025, 3, 2))
    first_b = _create(service, work_date=date(2025, 3, 15))
    second = _create(service, work_date=date(2025, 3, 16))
    other = _create(service, employee_id=2, work_date=date(2025, 3, 3))

    paid_ids = service.confirm_payment(year=2025, month=3, employee_id=1, fortnight_key="2025-03-first")

    assert sorted(paid_ids) == [first_a.record_id, first_b.record_id]
    assert payrolls.get_by_id(first_a.record_id).status == PayrollStatus.PAID
    assert payrolls.get_by_id(first_b.record_id).status == PayrollStatus.PAID
    assert payrolls.get_by_id(second.record_id).status == PayrollStatus.PENDING
    assert payrolls.get_by_id(other.record_id).status == PayrollStatus.PENDING


def test_confirm_payment_for_empty_fortnight(service):
    assert service.confirm_payment(year=2025, month=3, employee_id=1, fortnight_key="2025-03-second") == []


def test_stats(service, fixed_today):
    a = _create(service, work_date=date(2025, 3, 2))
    b = _create(service, work_date=date(2025, 3, 5))
    _create(service, work_date=date(2025, 2, 27))
    service.update_record(a.record_id, status="PAID")
    service.update_record(b.record_id, status="PROCESSED")

    stats = service.stats(today=fixed_today)

    assert (stats.total, stats.pending, stats.processed, stats.paid) == (3, 1, 1, 1)
    assert stats.current_month == 2
    assert stats.paid_current_month == 60000


def test_sub_cent_inputs_compute_the_same_after_storage(cents_payrolls, employees):
    service = PayrollService(cents_payrolls, employees, freeze_rate_at_creation=True)
    employees.update_hourly_rate(1, 10000.004)

    created = _create(
        service,
        consumptions=[{"amount": 1000.004, "description": "Menu"}],
        advance_on_pay=10.004,
        discrepancy=0.004,
    )
    shown = service.get_record(created.record_id)

    assert created.advance_on_pay == 10.0
    assert created.consumptions[0].amount == 1000.0
    assert shown.computed == created.computed
    assert service.month_summary(year=2025, month=3).total == round_up_50(created.net_pay)


def test_update_with_sub_cent_amounts_matches_display(cents_payrolls, employees):
    service = PayrollService(cents_payrolls, employees)
    entry = _create(service)

    updated = service.update_record(entry.record_id, prior_debt_owed_to_employee=2000.005)

    assert updated.computed == service.get_record(entry.record_id).computed


def test_update_notes_and_clear_them(service, payrolls):
    entry = _create(service, notes="late start")

    service.update_record(entry.record_id, status="PROCESSED")
    assert payrolls.get_by_id(entry.record_id).notes == "late start"

    cleared = service.update_record(entry.record_id, notes="")

    assert cleared.notes is None
    assert payrolls.get_by_id(entry.record_id).notes is None
