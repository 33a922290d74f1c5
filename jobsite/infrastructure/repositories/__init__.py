"""
Repository implementations for the registry layer.
"""
from .base_repository import BaseRepository
from .employee_repository import EmployeeRepository
from .project_repository import ProjectRepository

__all__ = [
    'BaseRepository',
    'EmployeeRepository',
    'ProjectRepository',
]
