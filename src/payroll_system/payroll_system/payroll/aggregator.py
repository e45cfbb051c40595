"""Grouping of computed payroll entries into month / fortnight / employee summaries.

Money totals are built bottom-up in explicit stages:

1. every entry's net pay is rounded up to the next multiple of 50,
2. an employee group sums its rounded entries,
3. a fortnight sums its employee groups,
4. a month sums its fortnights.

Rounding therefore always happens per entry, never on an aggregated sum.
"""
from __future__ import annotations

import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import month_key
from ..core.constants import FORTNIGHT_SPLIT_DAY, ROUNDING_STEP
from ..core.enums import Fortnight, PayrollStatus
from .model import PayrollEntry


def round_up_50(value: float) -> int:
    """Round a monetary amount up to the next multiple of 50."""
    return math.ceil(value / ROUNDING_STEP) * ROUNDING_STEP


def fortnight_of(work_date: date) -> Fortnight:
    return Fortnight.FIRST if work_date.day <= FORTNIGHT_SPLIT_DAY else Fortnight.SECOND


@dataclass(frozen=True)
class WorkedTime:
    hours: int = 0
    minutes: int = 0

    @classmethod
    def from_minutes(cls, total_minutes: int) -> "WorkedTime":
        hours, minutes = divmod(int(total_minutes), 60)
        return cls(hours=hours, minutes=minutes)

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes

    def __str__(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}"


@dataclass(frozen=True)
class StatusCounts:
    pending: int = 0
    processed: int = 0
    paid: int = 0

    @classmethod
    def of(cls, entries: Iterable[PayrollEntry]) -> "StatusCounts":
        counts = {status: 0 for status in PayrollStatus}
        for e in entries:
            counts[e.status] += 1
        return cls(
            pending=counts[PayrollStatus.PENDING],
            processed=counts[PayrollStatus.PROCESSED],
            paid=counts[PayrollStatus.PAID],
        )


@dataclass(frozen=True)
class PeriodFilter:
    employee_id: Optional[int] = None
    year: Optional[int] = None
    month: Optional[int] = None

    def matches(self, entry: PayrollEntry) -> bool:
        if self.employee_id is not None and entry.employee_id != self.employee_id:
            return False
        if self.year is not None and entry.work_date.year != int(self.year):
            return False
        if self.month is not None and entry.work_date.month != int(self.month):
            return False
        return True


@dataclass(frozen=True)
class EmployeeGroup:
    employee_id: int
    employee_name: str
    entries: tuple[PayrollEntry, ...]
    total: int
    worked_time: WorkedTime


@dataclass(frozen=True)
class FortnightGroup:
    key: str
    fortnight: Fortnight
    employees: tuple[EmployeeGroup, ...]
    total: int
    worked_time: WorkedTime
    status_counts: StatusCounts

    @property
    def entries(self) -> list[PayrollEntry]:
        return [e for g in self.employees for e in g.entries]

    @property
    def record_count(self) -> int:
        return sum(len(g.entries) for g in self.employees)


@dataclass(frozen=True)
class MonthGroup:
    key: str
    year: int
    month: int
    fortnights: tuple[FortnightGroup, ...]
    total: int
    worked_time: WorkedTime
    status_counts: StatusCounts

    @property
    def record_count(self) -> int:
        return sum(f.record_count for f in self.fortnights)


@dataclass(frozen=True)
class PeriodSummary:
    months: tuple[MonthGroup, ...] = ()
    total: int = 0
    worked_time: WorkedTime = WorkedTime()

    @property
    def is_empty(self) -> bool:
        return not self.months

    def fortnight(self, key: str) -> Optional[FortnightGroup]:
        for m in self.months:
            for f in m.fortnights:
                if f.key == key:
                    return f
        return None


def _sum_worked_time(entries: Iterable[PayrollEntry]) -> WorkedTime:
    # Sum in minutes, then split into hours and minutes.
    return WorkedTime.from_minutes(sum(e.computed.total_minutes for e in entries))


class PeriodAggregator:
    """Builds nested period summaries from computed payroll entries. Stateless."""

    def aggregate(self, entries: Sequence[PayrollEntry], period: Optional[PeriodFilter] = None) -> PeriodSummary:
        period = period or PeriodFilter()
        selected = [e for e in entries if period.matches(e)]
        if not selected:
            return PeriodSummary()

        by_month: dict[str, list[PayrollEntry]] = defaultdict(list)
        for e in selected:
            by_month[month_key(e.work_date)].append(e)

        months = tuple(self._month_group(key, by_month[key]) for key in sorted(by_month, reverse=True))
        return PeriodSummary(
            months=months,
            total=sum(m.total for m in months),
            worked_time=WorkedTime.from_minutes(sum(m.worked_time.total_minutes for m in months)),
        )

    def select_for_payment(self, summary: PeriodSummary, key: str) -> list[int]:
        """Record ids of every member of a fortnight, to be marked as paid by the caller."""
        group = summary.fortnight(key)
        if group is None:
            return []
        return [e.record_id for e in group.entries]

    def _month_group(self, key: str, entries: list[PayrollEntry]) -> MonthGroup:
        by_fortnight: dict[Fortnight, list[PayrollEntry]] = defaultdict(list)
        for e in entries:
            by_fortnight[fortnight_of(e.work_date)].append(e)

        fortnights = tuple(
            self._fortnight_group(f"{key}-{half.value}", half, by_fortnight[half])
            for half in (Fortnight.FIRST, Fortnight.SECOND)
            if half in by_fortnight
        )
        year, month = key.split("-")
        return MonthGroup(
            key=key,
            year=int(year),
            month=int(month),
            fortnights=fortnights,
            total=sum(f.total for f in fortnights),
            worked_time=_sum_worked_time(entries),
            status_counts=StatusCounts.of(entries),
        )

    def _fortnight_group(self, key: str, half: Fortnight, entries: list[PayrollEntry]) -> FortnightGroup:
        by_employee: dict[int, list[PayrollEntry]] = defaultdict(list)
        for e in entries:
            by_employee[e.employee_id].append(e)

        groups = [self._employee_group(members) for members in by_employee.values()]
        groups.sort(key=lambda g: (g.employee_name.casefold(), str(g.employee_id)))
        return FortnightGroup(
            key=key,
            fortnight=half,
            employees=tuple(groups),
            total=sum(g.total for g in groups),
            worked_time=_sum_worked_time(entries),
            status_counts=StatusCounts.of(entries),
        )

    def _employee_group(self, entries: list[PayrollEntry]) -> EmployeeGroup:
        ordered = sorted(entries, key=lambda e: e.work_date, reverse=True)
        rounded = [round_up_50(e.net_pay) for e in ordered]
        first = ordered[0]
        return EmployeeGroup(
            employee_id=first.employee_id,
            employee_name=first.employee_name,
            entries=tuple(ordered),
            total=sum(rounded),
            worked_time=_sum_worked_time(ordered),
        )


_default = PeriodAggregator()


def aggregate(entries: Sequence[PayrollEntry], period: Optional[PeriodFilter] = None) -> PeriodSummary:
    return _default.aggregate(entries, period)


def select_for_payment(summary: PeriodSummary, key: str) -> list[int]:
    return _default.select_for_payment(summary, key)
