from habitflow.crud.records import get_record, put_record

__all__ = ["get_record", "put_record"]
