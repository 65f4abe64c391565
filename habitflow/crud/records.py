from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from habitflow.models import StoredRecord


def get_record(db: Session, key: str) -> Optional[str]:
    return db.scalar(select(StoredRecord.payload).where(StoredRecord.key == key))


def put_record(db: Session, key: str, payload: str) -> StoredRecord:
    record = db.get(StoredRecord, key)
    if record:
        record.payload = payload
        record.updated_at = datetime.utcnow()
    else:
        record = StoredRecord(key=key, payload=payload)
    db.add(record)
    db.commit()
    return record

