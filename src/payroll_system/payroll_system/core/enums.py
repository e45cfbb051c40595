from __future__ import annotations

from enum import Enum


class PayrollStatus(str, Enum):
    """Lifecycle of a payroll record, driven by the payment workflow."""

    PENDING = "PENDING"
    PROCESSED = "PROCESSED"
    PAID = "PAID"


class Fortnight(str, Enum):
    """Half-month bucket: days 1-15 and 16-end of month."""

    FIRST = "first"
    SECOND = "second"
