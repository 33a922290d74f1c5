"""
Project Entity - Aggregate root for tasks and their staffing.

Lifecycle: PENDING -> ACTIVE -> FINISHED
- Status is derived from task coverage after every assignment
- FINISHED is terminal and only reached through finish()

Total cost = sum of task costs * markup, where the markup depends on
whether the project suffered any delay.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set

from ..exceptions import (
    ValidationError,
    ProjectFinishedError,
    TaskNotFoundError,
    TaskAlreadyAssignedError,
    TaskNotAssignedError,
    TaskAlreadyFinishedError,
)
from .employee import Employee, Number
from .task import Task

logger = logging.getLogger(__name__)


class ProjectStatus(str, Enum):
    """Lifecycle state of a project."""
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"


@dataclass(frozen=True)
class MarkupPolicy:
    """
    Multipliers applied to the summed task costs.

    Attributes:
        on_time: Markup when no delay occurred (35% by default)
        delayed: Markup when any task was delayed or the project finished late
    """
    on_time: Decimal = Decimal("1.35")
    delayed: Decimal = Decimal("1.25")

    def factor(self, had_delay: bool) -> Decimal:
        return self.delayed if had_delay else self.on_time


@dataclass(frozen=True)
class ClientInfo:
    """Contact data of the client who ordered the project."""
    name: str
    email: str = ""
    phone: str = ""

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValidationError("client.name", "must not be empty")
        # email and phone are optional; normalize None to empty strings
        if self.email is None:
            object.__setattr__(self, 'email', "")
        if self.phone is None:
            object.__setattr__(self, 'phone', "")

    @classmethod
    def from_sequence(cls, values: Sequence[str]) -> 'ClientInfo':
        """Build from a [name, email?, phone?] sequence."""
        if not values:
            raise ValidationError("client", "must include at least the client name")
        name = values[0]
        email = values[1] if len(values) > 1 else ""
        phone = values[2] if len(values) > 2 else ""
        return cls(name=name, email=email, phone=phone)


class Project:
    """
    Project with its tasks, assigned employees and billing.

    Employees are borrowed: the project stores their legajos in the
    assigned set and the history, while tasks keep direct references for
    billing. The employee registry remains the owner.
    """

    def __init__(
        self,
        project_id: int,
        client: ClientInfo,
        address: str,
        start_date: date,
        estimated_end_date: date,
        markup_policy: Optional[MarkupPolicy] = None,
    ):
        if not isinstance(client, ClientInfo):
            raise ValidationError("client", "must be a ClientInfo")
        if not address or not address.strip():
            raise ValidationError("address", "must not be empty")
        if not isinstance(start_date, date) or not isinstance(estimated_end_date, date):
            raise ValidationError("dates", "start and end must be dates")
        if estimated_end_date < start_date:
            raise ValidationError(
                "estimated_end_date",
                f"{estimated_end_date} is before start date {start_date}"
            )

        self.id = project_id
        self.client = client
        self.address = address
        self.start_date = start_date
        self.estimated_end_date = estimated_end_date
        self.actual_end_date = estimated_end_date
        self.markup_policy = markup_policy or MarkupPolicy()

        self._tasks: Dict[str, Task] = {}
        self._status = ProjectStatus.PENDING
        self._assigned: Set[int] = set()
        self._history: List[int] = []

    # =========================================================================
    # Status
    # =========================================================================

    @property
    def status(self) -> ProjectStatus:
        return self._status

    @property
    def is_pending(self) -> bool:
        return self._status is ProjectStatus.PENDING

    @property
    def is_active(self) -> bool:
        return self._status is ProjectStatus.ACTIVE

    @property
    def is_finished(self) -> bool:
        return self._status is ProjectStatus.FINISHED

    def _refresh_status(self) -> None:
        """Recompute PENDING/ACTIVE from task coverage. FINISHED is frozen."""
        if self.is_finished:
            return
        covered = all(t.has_responsible or t.finished for t in self._tasks.values())
        new_status = (
            ProjectStatus.ACTIVE if covered and self._tasks else ProjectStatus.PENDING
        )
        if new_status is not self._status:
            logger.debug(f"Project #{self.id}: {self._status.value} -> {new_status.value}")
        self._status = new_status

    def _ensure_open(self, operation: str) -> None:
        if self.is_finished:
            raise ProjectFinishedError(self.id, operation)

    def _require_task(self, title: str) -> Task:
        task = self._tasks.get(title)
        if task is None:
            raise TaskNotFoundError(title, self.id)
        return task

    # =========================================================================
    # Tasks
    # =========================================================================

    def add_task(self, title: str, description: str, duration_days: Number) -> Task:
        """
        Add a task after construction.

        Both the estimated and the actual end dates move forward by the
        task duration rounded up to whole days.

        Raises:
            ProjectFinishedError: If the project is finished
            ValidationError: If the task data is invalid or the new end
                dates fall outside the supported calendar
        """
        task = self._build_task(title, description, duration_days)
        try:
            shift = timedelta(days=math.ceil(task.estimated_duration))
            estimated_end = self.estimated_end_date + shift
            actual_end = self.actual_end_date + shift
        except OverflowError:
            raise ValidationError(
                "estimated_duration",
                f"{task.estimated_duration} days moves the end date past the calendar"
            )
        self._store_task(task)
        self.estimated_end_date = estimated_end
        self.actual_end_date = actual_end
        return task

    def add_initial_task(self, title: str, description: str, duration_days: Number) -> Task:
        """Add a task during project setup without moving the dates."""
        task = self._build_task(title, description, duration_days)
        self._store_task(task)
        return task

    def _build_task(self, title: str, description: str, duration_days: Number) -> Task:
        self._ensure_open("add tasks")
        return Task(title=title, description=description, estimated_duration=duration_days)

    def _store_task(self, task: Task) -> None:
        """Insert a task, releasing whoever worked on a task it replaces."""
        replaced = self._tasks.get(task.title)
        if replaced is not None and replaced.has_responsible:
            employee = replaced.responsible
            employee.release()
            self._assigned.discard(employee.legajo)
            logger.debug(
                f"Project #{self.id}: '{task.title}' replaced, released legajo {employee.legajo}"
            )
        self._tasks[task.title] = task

    def get_task(self, title: str) -> Optional[Task]:
        return self._tasks.get(title)

    def tasks(self) -> List[Task]:
        return list(self._tasks.values())

    def task_titles(self) -> List[str]:
        return list(self._tasks)

    def unassigned_tasks(self) -> List[Task]:
        """Tasks that are neither covered nor finished."""
        return [t for t in self._tasks.values() if not t.has_responsible and not t.finished]

    # =========================================================================
    # Staffing
    # =========================================================================

    @property
    def assigned_employee_ids(self) -> Set[int]:
        """Legajos of the employees currently working on this project."""
        return set(self._assigned)

    @property
    def employee_history(self) -> List[int]:
        """Legajos of every employee ever assigned, in first-assignment order."""
        return list(self._history)

    def _track(self, employee: Employee) -> None:
        employee.assign()
        self._assigned.add(employee.legajo)
        if employee.legajo not in self._history:
            self._history.append(employee.legajo)

    def assign_employee(self, title: str, employee: Employee) -> None:
        """
        Make an employee responsible for an uncovered task.

        Raises:
            ProjectFinishedError: If the project is finished
            TaskNotFoundError: If the title is unknown
            TaskAlreadyAssignedError: If the task already has a responsible
        """
        self._ensure_open("assign employees")
        task = self._require_task(title)
        if task.has_responsible:
            raise TaskAlreadyAssignedError(title, task.responsible.legajo)

        task.set_responsible(employee)
        self._track(employee)
        self._refresh_status()

    def reassign_employee(self, title: str, new_employee: Employee) -> None:
        """
        Replace the current responsible of a task.

        The previous employee is released. Coverage does not change, so the
        status is left as is.

        Raises:
            ProjectFinishedError: If the project is finished
            TaskNotFoundError: If the title is unknown
            TaskNotAssignedError: If the task has no responsible to replace
        """
        self._ensure_open("reassign employees")
        task = self._require_task(title)
        if not task.has_responsible:
            raise TaskNotAssignedError(title)

        previous = task.responsible
        previous.release()
        self._assigned.discard(previous.legajo)

        task.set_responsible(new_employee)
        self._track(new_employee)

    def record_delay(self, title: str, days: Number) -> None:
        """
        Record the delay of a task.

        The current responsible's delay counter grows only when the task
        goes from no delay to some delay.

        Raises:
            ProjectFinishedError: If the project is finished
            TaskNotFoundError: If the title is unknown
            ValidationError: If days is negative
        """
        self._ensure_open("record delays")
        task = self._require_task(title)

        previous_delay = task.delay
        task.record_delay(days)
        if task.has_responsible and previous_delay == 0 and task.has_delay:
            task.responsible.increment_delays()

    def finish_task(self, title: str) -> None:
        """
        Finish a task and release its responsible.

        The responsible keeps being billed through the historical reference.

        Raises:
            TaskNotFoundError: If the title is unknown
            TaskAlreadyFinishedError: If the task was already finished
        """
        task = self._require_task(title)
        if task.finished:
            raise TaskAlreadyFinishedError(title)

        task.finish()
        employee = task.responsible
        if employee is not None:
            employee.release()
            employee.record_completed_task(title)
            self._assigned.discard(employee.legajo)
            task.set_responsible(None)

    def finish(self, actual_end_date: date) -> None:
        """
        Close the project.

        Task coverage is not checked here. Every employee still working on
        the project is released.

        Raises:
            ValidationError: If the end date precedes the start date
        """
        if not isinstance(actual_end_date, date):
            raise ValidationError("actual_end_date", "must be a date")
        if actual_end_date < self.start_date:
            raise ValidationError(
                "actual_end_date",
                f"{actual_end_date} is before start date {self.start_date}"
            )

        self.actual_end_date = actual_end_date
        self._status = ProjectStatus.FINISHED
        for task in self._tasks.values():
            if task.has_responsible:
                task.responsible.release()
                task.set_responsible(None)
        self._assigned.clear()
        logger.debug(f"Project #{self.id} finished on {actual_end_date}")

    # =========================================================================
    # Billing
    # =========================================================================

    def had_delay(self) -> bool:
        """
        Whether the delayed markup applies.

        Any task with delay counts, finished or not. Finishing after the
        estimated end date counts only once the project is finished.
        """
        if any(t.has_delay for t in self._tasks.values()):
            return True
        return self.is_finished and self.actual_end_date > self.estimated_end_date

    def base_cost(self) -> Decimal:
        """Sum of task costs before markup."""
        return sum((t.cost() for t in self._tasks.values()), Decimal("0"))

    def total_cost(self) -> Decimal:
        """Sum of task costs with the markup applied."""
        return self.base_cost() * self.markup_policy.factor(self.had_delay())

    # =========================================================================
    # Representation
    # =========================================================================

    def summary(self, currency_symbol: str = "$", decimal_places: int = 2) -> str:
        """Plain-text summary of the project."""
        lines = [
            f"Project #{self.id}",
            f"Client: {self.client.name}",
        ]
        if self.client.email:
            lines.append(f"Email: {self.client.email}")
        if self.client.phone:
            lines.append(f"Phone: {self.client.phone}")
        lines.extend([
            f"Address: {self.address}",
            f"Status: {self._status.value}",
            f"Start date: {self.start_date.isoformat()}",
            f"Estimated end date: {self.estimated_end_date.isoformat()}",
            f"Actual end date: {self.actual_end_date.isoformat()}",
            "Tasks:",
        ])
        lines.extend(f"  - {task}" for task in self._tasks.values())
        lines.append(f"Total cost: {currency_symbol}{self.total_cost():.{decimal_places}f}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'id': self.id,
            'client': {
                'name': self.client.name,
                'email': self.client.email,
                'phone': self.client.phone,
            },
            'address': self.address,
            'status': self._status.value,
            'start_date': self.start_date.isoformat(),
            'estimated_end_date': self.estimated_end_date.isoformat(),
            'actual_end_date': self.actual_end_date.isoformat(),
            'tasks': [t.to_dict() for t in self._tasks.values()],
            'assigned_employees': sorted(self._assigned),
            'employee_history': list(self._history),
            'total_cost': float(self.total_cost()),
        }

    def __str__(self) -> str:
        return self.summary()

    def __repr__(self) -> str:
        return f"Project(id={self.id}, status={self._status.value}, tasks={len(self._tasks)})"
