"""
Domain Layer - Core business entities and services for project staffing.

This module contains:
- entities/: Employees (Contractor, Staff), Task and the Project aggregate
- services/: PortfolioService (registration, assignment and queries)
- exceptions: ValidationError and StateConflictError hierarchies
"""

from .entities.employee import Employee, Contractor, Staff, EmployeeKind, StaffCategory
from .entities.task import Task
from .entities.project import Project, ProjectStatus, ClientInfo, MarkupPolicy
from .sequence import IdSequence

__all__ = [
    'Employee', 'Contractor', 'Staff', 'EmployeeKind', 'StaffCategory',
    'Task',
    'Project', 'ProjectStatus', 'ClientInfo', 'MarkupPolicy',
    'IdSequence',
]
