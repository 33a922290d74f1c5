"""
Infrastructure Layer - Registry implementations.

This module provides:
- In-memory, id-keyed repositories for employees and projects
"""

from .repositories import (
    BaseRepository,
    EmployeeRepository,
    ProjectRepository,
)

__all__ = [
    'BaseRepository',
    'EmployeeRepository',
    'ProjectRepository',
]
