"""
Employee Repository - Registry of contractors and staff.

Single owner of every employee. Projects and tasks only borrow them.
"""
from decimal import Decimal
from typing import List, Optional, Union

from jobsite.domain.entities import Employee, Contractor, Staff, StaffCategory
from jobsite.domain.exceptions import EmployeeNotFoundError
from .base_repository import BaseRepository

Rate = Union[int, float, Decimal]


class EmployeeRepository(BaseRepository[Employee]):
    """Repository for employees keyed by legajo."""

    def _key(self, entity: Employee) -> int:
        return entity.legajo

    def _not_found(self, entity_id: int) -> Exception:
        return EmployeeNotFoundError(entity_id)

    def create_contractor(self, name: str, hourly_rate: Rate) -> Contractor:
        """
        Register an hourly contractor.

        Returns:
            The new contractor with its legajo assigned
        """
        return self._create(
            lambda legajo: Contractor(legajo=legajo, name=name, hourly_rate=hourly_rate)
        )

    def create_staff(self, name: str, daily_rate: Rate, category: Union[str, StaffCategory]) -> Staff:
        """
        Register a staff employee.

        Returns:
            The new staff employee with its legajo assigned
        """
        return self._create(
            lambda legajo: Staff(legajo=legajo, name=name, daily_rate=daily_rate, category=category)
        )

    def get_available(self) -> List[Employee]:
        """Employees not currently responsible for any task."""
        return self.filter(lambda e: e.available)

    def first_available(self) -> Optional[Employee]:
        """Earliest registered available employee."""
        for employee in self._items.values():
            if employee.available:
                return employee
        return None

    def least_delayed_available(self) -> Optional[Employee]:
        """
        Available employee with the fewest delays.

        Ties go to the earliest registered employee.
        """
        available = self.get_available()
        if not available:
            return None
        return min(available, key=lambda e: e.delay_count)
