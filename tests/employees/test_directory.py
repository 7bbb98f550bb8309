from src.attendance_payroll.attendance_payroll.employees.directory import (
    Found,
    NotFound,
    RepositoryEmployeeDirectory,
    ServiceError,
    name_tokens,
)
from src.attendance_payroll.attendance_payroll.employees.model import Employee


class FakeRepo:
    def __init__(self, employees=(), fail=False):
        self.employees = list(employees)
        self.fail = fail
        self.tokens = None

    def find_by_national_id(self, national_id):
        if self.fail:
            raise ConnectionError("MySQL server has gone away")
        return [e for e in self.employees if e.national_id == national_id]

    def search_by_name(self, tokens):
        if self.fail:
            raise ConnectionError("MySQL server has gone away")
        self.tokens = tokens
        return [e for e in self.employees if all(t in e.full_name.lower() for t in tokens)]


ANA = Employee(1, "40123456", "ANA MARIA PEREZ", "Operaria")


def test_lookup_variants():
    directory = RepositoryEmployeeDirectory(FakeRepo([ANA]))

    assert directory.lookup_by_national_id("40123456") == Found((ANA,))
    assert directory.lookup_by_national_id("1") == NotFound()


def test_name_lookup_uses_lowercase_tokens():
    repo = FakeRepo([ANA])
    result = RepositoryEmployeeDirectory(repo).lookup_by_name("  Perez  ana ")

    assert result == Found((ANA,))
    assert repo.tokens == ["perez", "ana"]


def test_blank_name_is_not_found_without_querying():
    repo = FakeRepo([ANA])
    assert RepositoryEmployeeDirectory(repo).lookup_by_name("   ") == NotFound()
    assert repo.tokens is None


def test_store_failure_becomes_service_error():
    directory = RepositoryEmployeeDirectory(FakeRepo(fail=True))

    result = directory.lookup_by_national_id("40123456")

    assert isinstance(result, ServiceError)
    assert "gone away" in result.reason
    assert isinstance(directory.lookup_by_name("ana"), ServiceError)


def test_first_active_skips_inactive_entries():
    inactive = Employee(2, "40123456", "ANA", "x", is_active=False)
    assert Found((inactive, ANA)).first_active() == ANA
    assert Found((inactive,)).first_active() is None


def test_name_tokens():
    assert name_tokens("Ana  María") == ["ana", "maría"]
