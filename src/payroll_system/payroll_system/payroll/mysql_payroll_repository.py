from __future__ import annotations

import json
from datetime import date
from typing import Iterable, Optional, Sequence

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json_list, normalize_mysql_time
from .model import Consumption, PayrollRecord, ShiftComputed
from .repository import PayrollRepository

_COLUMNS = """
    record_id, employee_id, work_date, start_time, end_time, consumptions,
    advance_on_pay, prior_debt_owed_to_employee, discrepancy, hourly_rate,
    status, notes, processed_by, created_at
"""


def _row_to_record(r: dict) -> PayrollRecord:
    rate = r.get("hourly_rate")
    return PayrollRecord(
        record_id=int(r["record_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        consumptions=tuple(
            Consumption(amount=float(c["amount"]), description=str(c["description"]))
            for c in load_json_list(r.get("consumptions"))
        ),
        advance_on_pay=float(r.get("advance_on_pay") or 0),
        prior_debt_owed_to_employee=float(r.get("prior_debt_owed_to_employee") or 0),
        discrepancy=float(r.get("discrepancy") or 0),
        hourly_rate=float(rate) if rate is not None else None,
        status=PayrollStatus(r["status"]),
        notes=r.get("notes"),
        processed_by=int(r["processed_by"]) if r.get("processed_by") is not None else None,
        created_at=r.get("created_at"),
    )


def _dump_consumptions(record: PayrollRecord) -> str:
    return json.dumps([{"amount": c.amount, "description": c.description} for c in record.consumptions])


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records WHERE record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[PayrollRecord]:
        where = ["1=1"]
        params: list = []
        if employee_id is not None:
            where.append("employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            where.append("status=%s")
            params.append(PayrollStatus(status).value)
        if start_date is not None:
            where.append("work_date>=%s")
            params.append(start_date)
        if end_date is not None:
            where.append("work_date<=%s")
            params.append(end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records
                WHERE {' AND '.join(where)}
                ORDER BY work_date DESC, created_at DESC, record_id DESC
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def create(self, record: PayrollRecord, computed: ShiftComputed) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_records(
                    employee_id, work_date, start_time, end_time, consumptions,
                    advance_on_pay, prior_debt_owed_to_employee, discrepancy, hourly_rate,
                    hours_worked, minutes_worked, gross_pay, net_pay,
                    status, notes, processed_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.employee_id,
                    record.work_date,
                    record.start_time,
                    record.end_time,
                    _dump_consumptions(record),
                    record.advance_on_pay,
                    record.prior_debt_owed_to_employee,
                    record.discrepancy,
                    record.hourly_rate,
                    computed.hours_worked,
                    computed.minutes_worked,
                    computed.gross_pay,
                    computed.net_pay,
                    record.status.value,
                    record.notes,
                    record.processed_by,
                ),
            )
            return int(cur.lastrowid)

    def update(self, record: PayrollRecord, computed: ShiftComputed) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_records
                SET work_date=%s, start_time=%s, end_time=%s, consumptions=%s,
                    advance_on_pay=%s, prior_debt_owed_to_employee=%s, discrepancy=%s, hourly_rate=%s,
                    hours_worked=%s, minutes_worked=%s, gross_pay=%s, net_pay=%s,
                    status=%s, notes=%s
                WHERE record_id=%s
                """,
                (
                    record.work_date,
                    record.start_time,
                    record.end_time,
                    _dump_consumptions(record),
                    record.advance_on_pay,
                    record.prior_debt_owed_to_employee,
                    record.discrepancy,
                    record.hourly_rate,
                    computed.hours_worked,
                    computed.minutes_worked,
                    computed.gross_pay,
                    computed.net_pay,
                    record.status.value,
                    record.notes,
                    record.record_id,
                ),
            )
            # Unchanged rows report rowcount 0; existence is checked by the service.
            return True

    def delete(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_records WHERE record_id=%s", (int(record_id),))
            return cur.rowcount > 0

    def mark_paid(self, record_ids: Iterable[int]) -> int:
        ids = [int(i) for i in record_ids]
        if not ids:
            return 0
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE payroll_records SET status=%s WHERE record_id IN ({placeholders})",
                (PayrollStatus.PAID.value, *ids),
            )
            return cur.rowcount
