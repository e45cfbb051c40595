from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import ShiftComputed, ShiftInput


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def worked_minutes(self, start_time, end_time) -> int:
        raise NotImplementedError

    @abstractmethod
    def compute_shift(self, shift: ShiftInput) -> ShiftComputed:
        raise NotImplementedError
