from __future__ import annotations

import logging
from dataclasses import asdict
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_clock, now_local, parse_iso_date
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container
from .aggregator import EmployeeGroup, FortnightGroup, MonthGroup, PeriodSummary
from .model import PayrollEntry, ShiftComputed

logger = logging.getLogger(__name__)


def computed_to_dict(c: ShiftComputed) -> dict:
    return {
        "hours_worked": c.hours_worked,
        "minutes_worked": c.minutes_worked,
        "gross_pay": c.gross_pay,
        "consumption_subtotal": c.consumption_subtotal,
        "consumption_discount": c.consumption_discount,
        "consumption_net": c.consumption_net,
        "net_pay": c.net_pay,
    }


def entry_to_dict(e: PayrollEntry) -> dict:
    return {
        "id": e.record_id,
        "employee_id": e.employee_id,
        "employee_name": e.employee_name,
        "work_date": e.work_date.strftime("%Y-%m-%d"),
        "start_time": format_clock(e.start_time),
        "end_time": format_clock(e.end_time),
        "status": e.status.value,
        "hourly_rate": e.hourly_rate,
        "consumptions": [{"amount": c.amount, "description": c.description} for c in e.consumptions],
        "advance_on_pay": e.advance_on_pay,
        "prior_debt_owed_to_employee": e.prior_debt_owed_to_employee,
        "discrepancy": e.discrepancy,
        "notes": e.notes or "",
        **computed_to_dict(e.computed),
    }


def _employee_group_to_dict(g: EmployeeGroup) -> dict:
    return {
        "employee_id": g.employee_id,
        "employee_name": g.employee_name,
        "total": g.total,
        "worked_time": str(g.worked_time),
        "records": [entry_to_dict(e) for e in g.entries],
    }


def _fortnight_to_dict(f: FortnightGroup) -> dict:
    return {
        "key": f.key,
        "fortnight": f.fortnight.value,
        "total": f.total,
        "worked_time": str(f.worked_time),
        "record_count": f.record_count,
        **asdict(f.status_counts),
        "employees": [_employee_group_to_dict(g) for g in f.employees],
    }


def _month_to_dict(m: MonthGroup) -> dict:
    return {
        "key": m.key,
        "year": m.year,
        "month": m.month,
        "total": m.total,
        "worked_time": str(m.worked_time),
        "record_count": m.record_count,
        **asdict(m.status_counts),
        "fortnights": [_fortnight_to_dict(f) for f in m.fortnights],
    }


def summary_to_dict(s: PeriodSummary) -> dict:
    return {
        "total": s.total,
        "worked_time": str(s.worked_time),
        "months": [_month_to_dict(m) for m in s.months],
    }


def _optional_int(value) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid integer: {value!r}") from None


def _optional_date(value):
    if not value:
        return None
    try:
        return parse_iso_date(str(value)[:10])
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}") from None


def _shift_fields(data: dict) -> dict:
    return {
        "start_time": data.get("start_time"),
        "end_time": data.get("end_time"),
        "consumptions": data.get("consumptions"),
        "advance_on_pay": data.get("advance_on_pay"),
        "prior_debt_owed_to_employee": data.get("prior_debt_owed_to_employee"),
        "discrepancy": data.get("discrepancy"),
    }


def _with_defaults(fields: dict) -> dict:
    for key in ("advance_on_pay", "prior_debt_owed_to_employee", "discrepancy"):
        if fields.get(key) is None:
            fields[key] = 0
    return fields


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    def json_errors(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"success": False, "message": str(e)}), 400
            except NotFoundError as e:
                return jsonify({"success": False, "message": str(e)}), 404
            except Exception:
                logger.exception("Unhandled error in %s", request.path)
                return jsonify({"success": False, "message": "Internal server error"}), 500

        return wrapper

    def _body() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    @app.route("/api/payroll", methods=["GET"], endpoint="payroll_list")
    @json_errors
    def payroll_list():
        entries = service.list_records(
            employee_id=_optional_int(request.args.get("employee_id")),
            status=request.args.get("status") or None,
            start=_optional_date(request.args.get("start")),
            end=_optional_date(request.args.get("end")),
        )
        return jsonify({"success": True, "data": [entry_to_dict(e) for e in entries]})

    @app.route("/api/payroll/<int:record_id>", methods=["GET"], endpoint="payroll_get")
    @json_errors
    def payroll_get(record_id: int):
        return jsonify({"success": True, "data": entry_to_dict(service.get_record(record_id))})

    @app.route("/api/payroll", methods=["POST"], endpoint="payroll_create")
    @json_errors
    def payroll_create():
        data = _body()
        employee_id = _optional_int(data.get("employee_id"))
        work_date = _optional_date(data.get("work_date"))
        if employee_id is None or work_date is None:
            raise ValidationError("employee_id and work_date are required")
        entry = service.create_record(
            employee_id=employee_id,
            work_date=work_date,
            notes=data.get("notes"),
            processed_by=_optional_int(data.get("processed_by")),
            **_with_defaults(_shift_fields(data)),
        )
        return jsonify({"success": True, "message": "Payroll record created", "data": entry_to_dict(entry)}), 201

    @app.route("/api/payroll/preview", methods=["POST"], endpoint="payroll_preview")
    @json_errors
    def payroll_preview():
        data = _body()
        employee_id = _optional_int(data.get("employee_id"))
        if employee_id is None:
            raise ValidationError("employee_id is required")
        computed = service.preview(
            employee_id=employee_id,
            work_date=_optional_date(data.get("work_date")) or now_local().date(),
            **_with_defaults(_shift_fields(data)),
        )
        return jsonify({"success": True, "data": computed_to_dict(computed)})

    @app.route("/api/payroll/<int:record_id>", methods=["PUT"], endpoint="payroll_update")
    @json_errors
    def payroll_update(record_id: int):
        data = _body()
        entry = service.update_record(
            record_id,
            work_date=_optional_date(data.get("work_date")),
            status=data.get("status"),
            notes=data.get("notes"),
            **_shift_fields(data),
        )
        return jsonify({"success": True, "message": "Payroll record updated", "data": entry_to_dict(entry)})

    @app.route("/api/payroll/<int:record_id>", methods=["DELETE"], endpoint="payroll_delete")
    @json_errors
    def payroll_delete(record_id: int):
        service.delete_record(record_id)
        return jsonify({"success": True, "message": "Payroll record deleted"})

    @app.route("/api/payroll/summary", methods=["GET"], endpoint="payroll_summary")
    @json_errors
    def payroll_summary():
        year = _optional_int(request.args.get("year"))
        month = _optional_int(request.args.get("month"))
        if year is None or month is None:
            raise ValidationError("year and month are required")
        summary = service.month_summary(
            year=year,
            month=month,
            employee_id=_optional_int(request.args.get("employee_id")),
        )
        return jsonify({"success": True, "data": summary_to_dict(summary)})

    @app.route("/api/payroll/confirm-payment", methods=["POST"], endpoint="payroll_confirm_payment")
    @json_errors
    def payroll_confirm_payment():
        data = _body()
        year = _optional_int(data.get("year"))
        month = _optional_int(data.get("month"))
        employee_id = _optional_int(data.get("employee_id"))
        fortnight_key = data.get("fortnight_key")
        if year is None or month is None or employee_id is None or not fortnight_key:
            raise ValidationError("year, month, employee_id and fortnight_key are required")
        record_ids = service.confirm_payment(
            year=year, month=month, employee_id=employee_id, fortnight_key=str(fortnight_key)
        )
        return jsonify({"success": True, "data": {"paid_record_ids": record_ids}})

    @app.route("/api/payroll/stats/summary", methods=["GET"], endpoint="payroll_stats")
    @json_errors
    def payroll_stats():
        stats = service.stats(employee_id=_optional_int(request.args.get("employee_id")))
        return jsonify({"success": True, "data": asdict(stats)})
