"""
Domain Exceptions for Project Staffing and Billing.

Custom exceptions enforcing business rules:
- Input validation (names, rates, categories, durations, dates)
- Project lifecycle (finished projects are frozen)
- Task assignment slots (one current responsible per task)
- Registry lookups (unknown projects and employees)
"""


class DomainError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


# =============================================================================
# Validation Exceptions
# =============================================================================

class ValidationError(DomainError):
    """Raised when input data is invalid."""

    def __init__(self, field: str, message: str):
        super().__init__(f"Validation failed for '{field}': {message}", code="VALIDATION_ERROR")
        self.field = field


# =============================================================================
# State Conflict Exceptions
# =============================================================================

class StateConflictError(DomainError):
    """Raised when an operation is not permitted in the current entity state."""

    def __init__(self, message: str, code: str = "STATE_CONFLICT"):
        super().__init__(message, code=code)


class ProjectFinishedError(StateConflictError):
    """Raised when attempting to modify a finished project."""

    def __init__(self, project_id: int, operation: str):
        message = f"Project #{project_id} is finished: cannot {operation}"
        super().__init__(message, code="PROJECT_FINISHED")
        self.project_id = project_id
        self.operation = operation


class TaskNotFoundError(StateConflictError):
    """Raised when a task title is not part of a project."""

    def __init__(self, title: str, project_id: int):
        message = f"Task '{title}' not found in project #{project_id}"
        super().__init__(message, code="TASK_NOT_FOUND")
        self.title = title
        self.project_id = project_id


class TaskAlreadyAssignedError(StateConflictError):
    """Raised when assigning a task that already has a current responsible."""

    def __init__(self, title: str, legajo: int):
        message = (
            f"Task '{title}' already has a responsible (legajo {legajo}). "
            f"Use reassignment to replace it."
        )
        super().__init__(message, code="TASK_ALREADY_ASSIGNED")
        self.title = title
        self.legajo = legajo


class TaskNotAssignedError(StateConflictError):
    """Raised when reassigning a task that has no current responsible."""

    def __init__(self, title: str):
        message = f"Task '{title}' has no responsible to replace"
        super().__init__(message, code="TASK_NOT_ASSIGNED")
        self.title = title


class TaskAlreadyFinishedError(StateConflictError):
    """Raised when finishing a task twice."""

    def __init__(self, title: str):
        message = f"Task '{title}' is already finished"
        super().__init__(message, code="TASK_ALREADY_FINISHED")
        self.title = title


class UnassignedTasksError(StateConflictError):
    """Raised when finishing a project that still has uncovered tasks."""

    def __init__(self, project_id: int, titles: list):
        message = (
            f"Project #{project_id} cannot be finished: "
            f"{len(titles)} task(s) without responsible ({', '.join(titles)})"
        )
        super().__init__(message, code="UNASSIGNED_TASKS")
        self.project_id = project_id
        self.titles = list(titles)


# =============================================================================
# Registry Exceptions
# =============================================================================

class ProjectNotFoundError(StateConflictError):
    """Raised when a project id is not registered."""

    def __init__(self, project_id: int):
        message = f"Project #{project_id} not found"
        super().__init__(message, code="PROJECT_NOT_FOUND")
        self.project_id = project_id


class EmployeeNotFoundError(StateConflictError):
    """Raised when an employee legajo is not registered."""

    def __init__(self, legajo: int):
        message = f"Employee with legajo {legajo} not found"
        super().__init__(message, code="EMPLOYEE_NOT_FOUND")
        self.legajo = legajo


class EmployeeUnavailableError(StateConflictError):
    """Raised when an explicitly chosen employee is already assigned elsewhere."""

    def __init__(self, legajo: int):
        message = f"Employee with legajo {legajo} is not available"
        super().__init__(message, code="EMPLOYEE_UNAVAILABLE")
        self.legajo = legajo


class NoAvailableEmployeeError(StateConflictError):
    """Raised when no registered employee is free for assignment."""

    def __init__(self):
        super().__init__("No available employees", code="NO_AVAILABLE_EMPLOYEE")
