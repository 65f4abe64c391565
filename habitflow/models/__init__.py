from habitflow.models.base import Base
from habitflow.models.stored_record import StoredRecord

__all__ = ["Base", "StoredRecord"]
