"""Backends for the three persisted records.

The store talks to anything with `get(key)` and `put(key, text)`.
"""
from typing import Optional, Protocol

from sqlalchemy.orm import sessionmaker

from habitflow.crud import get_record, put_record


class RecordStorage(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def put(self, key: str, payload: str) -> None:
        ...


class MemoryRecordStorage:
    def __init__(self, records: Optional[dict[str, str]] = None) -> None:
        self.records: dict[str, str] = dict(records or {})

    def get(self, key: str) -> Optional[str]:
        return self.records.get(key)

    def put(self, key: str, payload: str) -> None:
        self.records[key] = payload


class SqlRecordStorage:
    def __init__(self, session_factory: sessionmaker) -> None:
        self.session_factory = session_factory

    def get(self, key: str) -> Optional[str]:
        with self.session_factory() as db:
            return get_record(db, key)

    def put(self, key: str, payload: str) -> None:
        with self.session_factory() as db:
            put_record(db, key, payload)
