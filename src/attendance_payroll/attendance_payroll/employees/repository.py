from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, EmployeeInput


class EmployeeRepository(Protocol):
    """Repository interface for the employee master list.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def find_by_national_id(self, national_id: str) -> Sequence[Employee]:
        """All employees with this DNI, active ones first."""

        raise NotImplementedError

    def search_by_name(self, tokens: Sequence[str]) -> Sequence[Employee]:
        """Employees whose name contains every token (case-insensitive), active ones first."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def create(self, data: EmployeeInput) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, data: EmployeeInput) -> bool:
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError

    def set_active(self, employee_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError
