"""
Employee Entity - Staff members billed per task.

Two billing strategies exist:
- Contractor: billed per hour, 8 hours per working day
- Staff: billed per started day, with a 2% punctuality bonus when the
  task finished without delay
"""
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import List, Union

from ..exceptions import ValidationError

HOURS_PER_WORKDAY = 8
PUNCTUALITY_BONUS_RATE = Decimal("0.02")

Number = Union[int, float, Decimal]


def to_decimal(value: Number, field_name: str = "value") -> Decimal:
    """
    Convert a numeric input to Decimal without float artifacts.

    Raises:
        ValidationError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValidationError(field_name, "must be a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(field_name, f"must be a number, got {value!r}")
    if not amount.is_finite():
        raise ValidationError(field_name, f"must be a finite number, got {value!r}")
    return amount


class EmployeeKind(str, Enum):
    """Billing strategy of an employee."""
    CONTRACTOR = "contractor"
    STAFF = "staff"


class StaffCategory(str, Enum):
    """Seniority tier of a staff employee."""
    INITIAL = "INITIAL"
    TECHNICIAN = "TECHNICIAN"
    EXPERT = "EXPERT"

    @classmethod
    def parse(cls, value) -> 'StaffCategory':
        """
        Resolve a category from user input (case-insensitive).

        Raises:
            ValidationError: If the value is not a known category
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        allowed = ", ".join(c.value for c in cls)
        raise ValidationError("category", f"'{value}' is not one of {allowed}")


def _validate_name(name) -> str:
    if not name or not str(name).strip():
        raise ValidationError("name", "must not be empty")
    return name


def _validate_rate(field_name: str, rate: Number) -> Decimal:
    if rate is None:
        raise ValidationError(field_name, "is required")
    amount = to_decimal(rate, field_name)
    if amount < 0:
        raise ValidationError(field_name, "cannot be negative")
    return amount


@dataclass(eq=False)
class Employee(ABC):
    """
    Abstract employee.

    Identity is the legajo, a sequential number issued by the employee
    registry. Availability, delay count and completed tasks are mutated
    only through the methods below.

    Attributes:
        legajo: Unique sequential identifier
        name: Display name (non-empty)
        available: False while the employee is responsible for a task
        delay_count: Number of tasks that became delayed under this employee
    """

    legajo: int
    name: str
    available: bool = field(default=True, init=False)
    delay_count: int = field(default=0, init=False)
    _completed_tasks: List[str] = field(default_factory=list, init=False, repr=False)

    kind = None

    def __post_init__(self):
        _validate_name(self.name)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def assign(self) -> None:
        """Mark the employee as busy."""
        self.available = False

    def release(self) -> None:
        """Mark the employee as free."""
        self.available = True

    def increment_delays(self) -> None:
        """Count one more delayed task."""
        self.delay_count += 1

    def record_completed_task(self, title: str) -> None:
        """Append a finished task title to the history."""
        self._completed_tasks.append(title)

    @property
    def completed_tasks(self) -> List[str]:
        """Copy of the completed task titles, oldest first."""
        return list(self._completed_tasks)

    @property
    def has_delays(self) -> bool:
        return self.delay_count > 0

    # =========================================================================
    # Billing
    # =========================================================================

    @abstractmethod
    def compute_task_cost(self, duration_days: Number, had_delay: bool) -> Decimal:
        """
        Cost of a task of the given actual duration.

        Args:
            duration_days: Actual duration in days (estimate plus delay)
            had_delay: Whether the task accumulated any delay

        Returns:
            Task cost
        """

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'legajo': self.legajo,
            'name': self.name,
            'kind': self.kind.value,
            'available': self.available,
            'delay_count': self.delay_count,
            'completed_tasks': self.completed_tasks,
        }

    def describe(self) -> str:
        """Multi-line description of the employee."""
        return "\n".join([
            f"Legajo: {self.legajo}",
            f"Name: {self.name}",
            f"Available: {'Yes' if self.available else 'No'}",
            f"Delays: {self.delay_count}",
            f"Completed tasks: {len(self._completed_tasks)}",
        ])

    def __str__(self) -> str:
        return str(self.legajo)


@dataclass(eq=False)
class Contractor(Employee):
    """
    Employee billed by the hour.

    Cost = duration_days * 8 * hourly_rate. Delays do not change the rate.
    """

    hourly_rate: Decimal = None

    kind = EmployeeKind.CONTRACTOR

    def __post_init__(self):
        super().__post_init__()
        self.hourly_rate = _validate_rate("hourly_rate", self.hourly_rate)

    def set_hourly_rate(self, hourly_rate: Number) -> None:
        self.hourly_rate = _validate_rate("hourly_rate", hourly_rate)

    def work_hours(self, duration_days: Number) -> Decimal:
        """Hours represented by a duration in days."""
        return to_decimal(duration_days, "duration_days") * HOURS_PER_WORKDAY

    def compute_task_cost(self, duration_days: Number, had_delay: bool) -> Decimal:
        return self.work_hours(duration_days) * self.hourly_rate

    def estimated_cost(self, days: Number) -> Decimal:
        """Quote for a task before it is assigned."""
        return self.compute_task_cost(days, False)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['hourly_rate'] = float(self.hourly_rate)
        return data

    def describe(self) -> str:
        return "\n".join([
            "=== CONTRACTOR ===",
            super().describe(),
            f"Hourly rate: ${self.hourly_rate:.2f}",
        ])


@dataclass(eq=False)
class Staff(Employee):
    """
    Permanent employee billed per started day.

    Half a day or less still bills a full day (ceiling rounding). Finishing
    a task without delay earns a 2% punctuality bonus.
    """

    daily_rate: Decimal = None
    category: StaffCategory = None

    kind = EmployeeKind.STAFF

    def __post_init__(self):
        super().__post_init__()
        self.daily_rate = _validate_rate("daily_rate", self.daily_rate)
        self.category = StaffCategory.parse(self.category)

    def set_daily_rate(self, daily_rate: Number) -> None:
        self.daily_rate = _validate_rate("daily_rate", daily_rate)

    def set_category(self, category) -> None:
        self.category = StaffCategory.parse(category)

    def billed_days(self, duration_days: Number) -> int:
        """Whole days billed for a duration (0.5 -> 1, 1.3 -> 2, 2.0 -> 2)."""
        return math.ceil(to_decimal(duration_days, "duration_days"))

    def base_cost(self, duration_days: Number) -> Decimal:
        return self.daily_rate * self.billed_days(duration_days)

    def punctuality_bonus(self, duration_days: Number) -> Decimal:
        """Bonus earned when the task finishes on time."""
        return self.base_cost(duration_days) * PUNCTUALITY_BONUS_RATE

    def compute_task_cost(self, duration_days: Number, had_delay: bool) -> Decimal:
        cost = self.base_cost(duration_days)
        if not had_delay:
            cost *= 1 + PUNCTUALITY_BONUS_RATE
        return cost

    def estimated_cost(self, days: Number, with_delay: bool = False) -> Decimal:
        """Quote for a task before it is assigned."""
        return self.compute_task_cost(days, with_delay)

    @property
    def is_initial(self) -> bool:
        return self.category is StaffCategory.INITIAL

    @property
    def is_technician(self) -> bool:
        return self.category is StaffCategory.TECHNICIAN

    @property
    def is_expert(self) -> bool:
        return self.category is StaffCategory.EXPERT

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['daily_rate'] = float(self.daily_rate)
        data['category'] = self.category.value
        return data

    def describe(self) -> str:
        return "\n".join([
            "=== STAFF ===",
            super().describe(),
            f"Daily rate: ${self.daily_rate:.2f}",
            f"Category: {self.category.value}",
        ])
