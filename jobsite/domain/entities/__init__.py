"""
Domain Entities - Employees, tasks and projects.
"""

from .employee import Employee, Contractor, Staff, EmployeeKind, StaffCategory
from .task import Task
from .project import Project, ProjectStatus, ClientInfo, MarkupPolicy

__all__ = [
    'Employee', 'Contractor', 'Staff', 'EmployeeKind', 'StaffCategory',
    'Task',
    'Project', 'ProjectStatus', 'ClientInfo', 'MarkupPolicy',
]
