"""Directory lookups used to validate imported attendance rows.

A lookup never raises for data reasons; it answers with one of three
variants that callers dispatch on explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence, Union

from .model import Employee
from .repository import EmployeeRepository

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Found:
    entries: tuple[Employee, ...]

    def first_active(self) -> Employee | None:
        return next((e for e in self.entries if e.is_active), None)


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class ServiceError:
    reason: str


LookupResult = Union[Found, NotFound, ServiceError]


def name_tokens(name: str) -> list[str]:
    return [t for t in (name or "").lower().split() if t]


class EmployeeDirectory(Protocol):
    def lookup_by_national_id(self, national_id: str) -> LookupResult:
        raise NotImplementedError

    def lookup_by_name(self, name: str) -> LookupResult:
        raise NotImplementedError


class RepositoryEmployeeDirectory(EmployeeDirectory):
    """Adapts an EmployeeRepository; store failures become ServiceError."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    @staticmethod
    def _wrap(entries: Sequence[Employee]) -> LookupResult:
        return Found(tuple(entries)) if entries else NotFound()

    def lookup_by_national_id(self, national_id: str) -> LookupResult:
        try:
            return self._wrap(self._employees.find_by_national_id(national_id))
        except Exception as e:
            _logger.warning("directory lookup by DNI %s failed: %s", national_id, e)
            return ServiceError(str(e) or type(e).__name__)

    def lookup_by_name(self, name: str) -> LookupResult:
        tokens = name_tokens(name)
        if not tokens:
            return NotFound()
        try:
            return self._wrap(self._employees.search_by_name(tokens))
        except Exception as e:
            _logger.warning("directory lookup by name %r failed: %s", name, e)
            return ServiceError(str(e) or type(e).__name__)
