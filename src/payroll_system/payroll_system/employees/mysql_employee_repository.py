from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        full_name=r["full_name"],
        hourly_rate=float(r["hourly_rate"]),
        is_active=bool(r["is_active"]),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, full_name, hourly_rate, is_active
                FROM employees
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def list_active(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, full_name, hourly_rate, is_active
                FROM employees
                WHERE is_active=1
                ORDER BY full_name
                """
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def update_hourly_rate(self, employee_id: int, hourly_rate: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET hourly_rate=%s WHERE employee_id=%s",
                (hourly_rate, int(employee_id)),
            )
            # Unchanged rows report rowcount 0; existence is checked by the service.
            return True

    def deactivate(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET is_active=0 WHERE employee_id=%s", (int(employee_id),))
            return True
