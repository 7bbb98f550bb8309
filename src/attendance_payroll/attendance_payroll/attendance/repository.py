from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from .model import AttendanceRecord, RecordKey


class AttendanceRepository(Protocol):
    """Keyed collection of the records loaded in the current session."""

    def add_many(self, records: Iterable[AttendanceRecord]) -> int:
        raise NotImplementedError

    def register_source(self, source_file: str) -> None:
        raise NotImplementedError

    def get(self, key: RecordKey) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def put(self, record: AttendanceRecord) -> None:
        raise NotImplementedError

    def remove_source(self, source_file: str) -> int:
        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_sources(self) -> Sequence[str]:
        raise NotImplementedError


class InMemoryAttendanceRepository(AttendanceRepository):
    """Attendance records live only for the session; nothing is persisted."""

    def __init__(self):
        self._records: dict[RecordKey, AttendanceRecord] = {}
        self._sources: list[str] = []

    def add_many(self, records: Iterable[AttendanceRecord]) -> int:
        added = 0
        for record in records:
            if record.source_file not in self._sources:
                self._sources.append(record.source_file)
            self._records[record.key] = record
            added += 1
        return added

    def register_source(self, source_file: str) -> None:
        if source_file not in self._sources:
            self._sources.append(source_file)

    def get(self, key: RecordKey) -> Optional[AttendanceRecord]:
        return self._records.get(key)

    def put(self, record: AttendanceRecord) -> None:
        if record.key not in self._records:
            raise KeyError(record.key)
        self._records[record.key] = record

    def remove_source(self, source_file: str) -> int:
        keys = [k for k in self._records if k.source_file == source_file]
        for k in keys:
            del self._records[k]
        if source_file in self._sources:
            self._sources.remove(source_file)
        return len(keys)

    def list_all(self) -> Sequence[AttendanceRecord]:
        return list(self._records.values())

    def list_sources(self) -> Sequence[str]:
        return list(self._sources)
