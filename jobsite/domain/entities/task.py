"""
Task Entity - Unit of work inside a project.

A task keeps two responsible references:
- current: the employee working on it right now (cleared on finish)
- historical: the last employee ever assigned, kept for billing
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from ..exceptions import ValidationError
from .employee import Employee, Number, to_decimal

MIN_DURATION_DAYS = Decimal("0.5")


@dataclass(eq=False)
class Task:
    """
    Task identified by its title.

    Attributes:
        title: Unique title within the owning project
        description: Free-text description
        estimated_duration: Planned duration in days (at least half a day)
        delay: Accumulated delay in days (latest recorded value)
        finished: Completion flag, set once
    """

    title: str
    description: str = ""
    estimated_duration: Decimal = MIN_DURATION_DAYS
    delay: Decimal = field(default=Decimal("0"), init=False)
    finished: bool = field(default=False, init=False)
    _responsible: Optional[Employee] = field(default=None, init=False, repr=False)
    _historical_responsible: Optional[Employee] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        if not self.title:
            raise ValidationError("title", "must not be empty")
        if self.estimated_duration is None:
            raise ValidationError("estimated_duration", "is required")
        self.estimated_duration = to_decimal(self.estimated_duration, "estimated_duration")
        if self.estimated_duration < MIN_DURATION_DAYS:
            raise ValidationError(
                "estimated_duration",
                f"minimum is {MIN_DURATION_DAYS} days, got {self.estimated_duration}"
            )
        if self.description is None:
            self.description = ""

    # =========================================================================
    # Responsible
    # =========================================================================

    @property
    def responsible(self) -> Optional[Employee]:
        """Employee currently working on the task."""
        return self._responsible

    @property
    def historical_responsible(self) -> Optional[Employee]:
        """Last employee ever assigned, used for billing."""
        return self._historical_responsible

    def set_responsible(self, employee: Optional[Employee]) -> None:
        """
        Set the current responsible.

        Passing None clears the current responsible only; the historical
        responsible is never cleared.
        """
        self._responsible = employee
        if employee is not None:
            self._historical_responsible = employee

    @property
    def has_responsible(self) -> bool:
        return self._responsible is not None

    # =========================================================================
    # Progress
    # =========================================================================

    def record_delay(self, days: Number) -> None:
        """
        Replace the accumulated delay.

        Raises:
            ValidationError: If days is not a number or is negative
        """
        amount = to_decimal(days, "delay")
        if amount < 0:
            raise ValidationError("delay", "cannot be negative")
        self.delay = amount

    def finish(self) -> None:
        self.finished = True

    @property
    def actual_duration(self) -> Decimal:
        """Estimated duration plus delay, in days."""
        return self.estimated_duration + self.delay

    @property
    def has_delay(self) -> bool:
        return self.delay > 0

    def cost(self) -> Decimal:
        """
        Cost billed by the historical responsible.

        Returns:
            Zero if nobody was ever assigned
        """
        if self._historical_responsible is None:
            return Decimal("0")
        return self._historical_responsible.compute_task_cost(
            self.actual_duration, self.has_delay
        )

    # =========================================================================
    # Representation
    # =========================================================================

    def responsible_label(self) -> str:
        if self._responsible is not None:
            return self._responsible.name
        if self._historical_responsible is not None:
            return f"{self._historical_responsible.name} (historical)"
        return "Unassigned"

    def status_label(self) -> str:
        return "Finished" if self.finished else "Pending"

    def describe(self) -> str:
        """Multi-line description including the current cost."""
        lines = [
            f"Title: {self.title}",
            f"Description: {self.description}",
            f"Estimated duration: {self.estimated_duration} days",
            f"Delay: {self.delay} days",
            f"Actual duration: {self.actual_duration} days",
        ]
        if self._responsible is not None:
            lines.append(
                f"Current responsible: {self._responsible.name} "
                f"(legajo {self._responsible.legajo})"
            )
        elif self._historical_responsible is not None:
            lines.append(
                f"Historical responsible: {self._historical_responsible.name} "
                f"(legajo {self._historical_responsible.legajo})"
            )
        else:
            lines.append("Responsible: Unassigned")
        lines.append(f"Status: {self.status_label()}")
        lines.append(f"Cost: ${self.cost():.2f}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'title': self.title,
            'description': self.description,
            'estimated_duration': float(self.estimated_duration),
            'delay': float(self.delay),
            'actual_duration': float(self.actual_duration),
            'finished': self.finished,
            'responsible': self._responsible.legajo if self._responsible else None,
            'historical_responsible': (
                self._historical_responsible.legajo
                if self._historical_responsible else None
            ),
            'cost': float(self.cost()),
        }

    def __str__(self) -> str:
        return f"{self.title} - {self.responsible_label()} - {self.status_label()}"

    def __eq__(self, other) -> bool:
        if self is other:
            return True
        if not isinstance(other, Task):
            return NotImplemented
        return self.title == other.title

    def __hash__(self) -> int:
        return hash(self.title)
