"""
Portfolio Service - Registration, staffing and queries across projects.

Implements the operations exposed to callers:
- Employee and project registration with sequential numbering
- Automatic assignment (first available, fewest delays)
- Explicit reassignment of a registered employee
- Task bookkeeping and project closing
- Status and staffing queries, cost and summary reports
"""
import logging
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from jobsite.config import JobsiteConfig, get_config
from jobsite.domain.entities import Employee, Project, ProjectStatus, ClientInfo
from jobsite.domain.exceptions import (
    ValidationError,
    ProjectFinishedError,
    EmployeeUnavailableError,
    NoAvailableEmployeeError,
    UnassignedTasksError,
)
from jobsite.infrastructure.repositories import EmployeeRepository, ProjectRepository

logger = logging.getLogger(__name__)


class PortfolioService:
    """
    Service owning the employee and project registries.

    Projects and employees are addressed by number (project id, legajo).
    Unknown numbers raise ProjectNotFoundError / EmployeeNotFoundError.
    """

    def __init__(
        self,
        config: Optional[JobsiteConfig] = None,
        employees: Optional[EmployeeRepository] = None,
        projects: Optional[ProjectRepository] = None,
    ):
        self.config = config or get_config()
        self.employees_repo = employees if employees is not None else EmployeeRepository()
        self.projects_repo = projects if projects is not None else ProjectRepository()

    def reset(self) -> None:
        """Forget every employee and project and restart numbering."""
        self.employees_repo.clear()
        self.projects_repo.clear()

    # =========================================================================
    # Registration
    # =========================================================================

    def register_contractor(self, name: str, hourly_rate) -> int:
        """
        Register an hourly contractor.

        Args:
            name: Employee name
            hourly_rate: Rate per hour (non-negative)

        Returns:
            Legajo of the new employee
        """
        employee = self.employees_repo.create_contractor(name, hourly_rate)
        logger.info(f"Registered contractor {employee.name} (legajo {employee.legajo})")
        return employee.legajo

    def register_staff(self, name: str, daily_rate, category: str) -> int:
        """
        Register a staff employee.

        Args:
            name: Employee name
            daily_rate: Rate per day (non-negative)
            category: INITIAL, TECHNICIAN or EXPERT (case-insensitive)

        Returns:
            Legajo of the new employee
        """
        employee = self.employees_repo.create_staff(name, daily_rate, category)
        logger.info(
            f"Registered staff {employee.name} (legajo {employee.legajo}, "
            f"{employee.category.value})"
        )
        return employee.legajo

    def register_project(
        self,
        titles: Sequence[str],
        descriptions: Sequence[str],
        days: Sequence[float],
        address: str,
        client: Sequence[str],
        start: str,
        end: str,
    ) -> int:
        """
        Register a project with its initial tasks.

        The estimated end date is expected to already cover the initial
        tasks, so they are attached without moving the dates.

        Args:
            titles: Task titles
            descriptions: Task descriptions, parallel to titles
            days: Task durations in days, parallel to titles
            address: Site address
            client: [name, email?, phone?]
            start: Start date string
            end: Estimated end date string

        Returns:
            Number of the new project
        """
        if (
            not titles or descriptions is None or days is None
            or len(titles) != len(descriptions) or len(titles) != len(days)
        ):
            raise ValidationError(
                "tasks", "titles, descriptions and days must be non-empty and of equal length"
            )

        project = self.projects_repo.create(
            client=ClientInfo.from_sequence(client),
            address=address,
            start_date=self.config.parse_date(start, "start"),
            estimated_end_date=self.config.parse_date(end, "end"),
            initial_tasks=list(zip(titles, descriptions, days)),
            markup_policy=self.config.markup_policy(),
        )
        logger.info(
            f"Registered project #{project.id} at {project.address} "
            f"with {len(titles)} task(s)"
        )
        return project.id

    # =========================================================================
    # Assignment
    # =========================================================================

    def _open_project(self, project_id: int, operation: str) -> Project:
        project = self.projects_repo.require(project_id)
        if project.is_finished:
            logger.warning(f"Rejected '{operation}' on finished project #{project_id}")
            raise ProjectFinishedError(project_id, operation)
        return project

    def _pick(self, employee: Optional[Employee]) -> Employee:
        if employee is None:
            logger.warning("No available employees for assignment")
            raise NoAvailableEmployeeError()
        return employee

    def assign_first_available(self, project_id: int, title: str) -> int:
        """
        Assign the earliest registered available employee to a task.

        Returns:
            Legajo of the assigned employee
        """
        project = self._open_project(project_id, "assign employees")
        employee = self._pick(self.employees_repo.first_available())
        project.assign_employee(title, employee)
        logger.info(f"Assigned legajo {employee.legajo} to '{title}' in project #{project_id}")
        return employee.legajo

    def assign_least_delayed(self, project_id: int, title: str) -> int:
        """
        Assign the available employee with the fewest delays to a task.

        Returns:
            Legajo of the assigned employee
        """
        project = self._open_project(project_id, "assign employees")
        employee = self._pick(self.employees_repo.least_delayed_available())
        project.assign_employee(title, employee)
        logger.info(
            f"Assigned legajo {employee.legajo} ({employee.delay_count} delays) "
            f"to '{title}' in project #{project_id}"
        )
        return employee.legajo

    def reassign_employee(self, project_id: int, legajo: int, title: str) -> None:
        """
        Replace the responsible of a task with a specific employee.

        Raises:
            EmployeeUnavailableError: If the employee is busy
        """
        project = self.projects_repo.require(project_id)
        employee = self.employees_repo.require(legajo)
        if not employee.available:
            logger.warning(f"Legajo {legajo} is busy, cannot take '{title}'")
            raise EmployeeUnavailableError(legajo)
        project.reassign_employee(title, employee)
        logger.info(f"Reassigned '{title}' in project #{project_id} to legajo {legajo}")

    def reassign_least_delayed(self, project_id: int, title: str) -> int:
        """
        Replace the responsible of a task with the least delayed available employee.

        Returns:
            Legajo of the new responsible
        """
        project = self.projects_repo.require(project_id)
        employee = self._pick(self.employees_repo.least_delayed_available())
        project.reassign_employee(title, employee)
        logger.info(f"Reassigned '{title}' in project #{project_id} to legajo {employee.legajo}")
        return employee.legajo

    # =========================================================================
    # Task Bookkeeping
    # =========================================================================

    def record_delay(self, project_id: int, title: str, days) -> None:
        self.projects_repo.require(project_id).record_delay(title, days)
        logger.info(f"Recorded {days} day(s) of delay on '{title}' in project #{project_id}")

    def add_task(self, project_id: int, title: str, description: str, days) -> None:
        """Add a task to a registered project, moving its end dates."""
        project = self.projects_repo.require(project_id)
        project.add_task(title, description, days)
        logger.info(
            f"Added task '{title}' to project #{project_id}; "
            f"estimated end now {project.estimated_end_date}"
        )

    def finish_task(self, project_id: int, title: str) -> None:
        self.projects_repo.require(project_id).finish_task(title)
        logger.info(f"Finished task '{title}' in project #{project_id}")

    def finish_project(self, project_id: int, end: str) -> None:
        """
        Close a project.

        Raises:
            UnassignedTasksError: If a task is neither covered nor finished
            ValidationError: If the end date is malformed or before the start
        """
        project = self.projects_repo.require(project_id)
        pending = project.unassigned_tasks()
        if pending:
            titles = [t.title for t in pending]
            logger.warning(f"Project #{project_id} has uncovered tasks: {titles}")
            raise UnassignedTasksError(project_id, titles)
        project.finish(self.config.parse_date(end, "end"))
        logger.info(f"Finished project #{project_id} on {project.actual_end_date}")

    # =========================================================================
    # Queries
    # =========================================================================

    def project_cost(self, project_id: int) -> Decimal:
        """Total cost of a project, markup included."""
        project = self.projects_repo.require(project_id)
        cost = project.total_cost()
        logger.info(
            f"Project #{project_id} cost: status={project.status.value}, "
            f"estimated_end={project.estimated_end_date}, "
            f"actual_end={project.actual_end_date}, cost={cost}"
        )
        return cost

    def _by_status(self, status: ProjectStatus) -> List[Tuple[int, str]]:
        projects = self.projects_repo.get_by_status(status)
        logger.debug(f"{len(projects)} project(s) in status {status.value}")
        return [(p.id, p.address) for p in projects]

    def finished_projects(self) -> List[Tuple[int, str]]:
        """(id, address) of finished projects."""
        return self._by_status(ProjectStatus.FINISHED)

    def pending_projects(self) -> List[Tuple[int, str]]:
        """(id, address) of pending projects."""
        return self._by_status(ProjectStatus.PENDING)

    def active_projects(self) -> List[Tuple[int, str]]:
        """(id, address) of active projects."""
        return self._by_status(ProjectStatus.ACTIVE)

    def available_employees(self) -> List[int]:
        """Legajos of employees not assigned to any task."""
        return [e.legajo for e in self.employees_repo.get_available()]

    def is_finished(self, project_id: int) -> bool:
        return self.projects_repo.require(project_id).is_finished

    def employee_delay_count(self, legajo: int) -> int:
        return self.employees_repo.require(legajo).delay_count

    def employee_has_delays(self, legajo: int) -> bool:
        return self.employees_repo.require(legajo).has_delays

    def employees_on_project(self, project_id: int) -> List[Tuple[int, str]]:
        """(legajo, name) of every employee who ever worked on the project."""
        project = self.projects_repo.require(project_id)
        result = []
        for legajo in project.employee_history:
            employee = self.employees_repo.get_by_id(legajo)
            if employee is not None:
                result.append((employee.legajo, employee.name))
        return result

    def unassigned_task_titles(self, project_id: int) -> List[str]:
        """
        Titles of tasks without responsible.

        Raises:
            ProjectFinishedError: If the project is finished
        """
        project = self._open_project(project_id, "list unassigned tasks")
        return [t.title for t in project.unassigned_tasks()]

    def task_titles(self, project_id: int) -> List[str]:
        return self.projects_repo.require(project_id).task_titles()

    def project_address(self, project_id: int) -> str:
        return self.projects_repo.require(project_id).address

    def employees(self) -> List[Tuple[int, str]]:
        """(legajo, name) of every registered employee."""
        return [(e.legajo, e.name) for e in self.employees_repo.get_all()]

    def project_summary(self, project_id: int) -> str:
        """Plain-text summary formatted with the configured currency."""
        project = self.projects_repo.require(project_id)
        return project.summary(
            currency_symbol=self.config.currency_symbol,
            decimal_places=self.config.decimal_places,
        )
