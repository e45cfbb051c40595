from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    payrolls_repo: PayrollRepository

    payroll_service: PayrollService
    employee_service: EmployeeService

    conn: Optional[DatabaseConnection] = None


def build_container(*, db_config: dict, freeze_rate_at_creation: bool = False) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    payrolls_repo = MySQLPayrollRepository(conn)

    employee_service = EmployeeService(employees_repo)
    payroll_service = PayrollService(
        payrolls_repo,
        employees_repo,
        freeze_rate_at_creation=freeze_rate_at_creation,
    )

    return Container(
        employees_repo=employees_repo,
        payrolls_repo=payrolls_repo,
        payroll_service=payroll_service,
        employee_service=employee_service,
        conn=conn,
    )
