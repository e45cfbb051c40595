from __future__ import annotations

import logging
from typing import Sequence

from ..common.validators import require_money
from ..core.exceptions import NotFoundError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Employee directory: listing, hourly rate changes and deactivation.

    A rate change takes effect on every payroll record computed afterwards,
    unless the payroll service freezes rates at creation.
    """

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def list_active(self) -> Sequence[Employee]:
        return self._employees.list_active()

    def update_hourly_rate(self, employee_id: int, hourly_rate) -> Employee:
        employee = self.get_employee(employee_id)
        rate = require_money(hourly_rate, "Hourly rate")
        self._employees.update_hourly_rate(employee.employee_id, rate)
        logger.info("Employee %s hourly rate %.2f -> %.2f", employee.employee_id, employee.hourly_rate, rate)
        return self.get_employee(employee.employee_id)

    def deactivate(self, employee_id: int) -> Employee:
        employee = self.get_employee(employee_id)
        self._employees.deactivate(employee.employee_id)
        logger.info("Employee %s deactivated", employee.employee_id)
        return self.get_employee(employee.employee_id)
