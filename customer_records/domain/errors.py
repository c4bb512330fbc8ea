"""Failures raised by the record store.

Handlers map each class to an HTTP status; only ``StorageError`` signals a
fault worth an operator's attention.
"""


class RecordStoreError(Exception):
    """Base class for every classified record store failure."""


class ValidationError(RecordStoreError):
    """Inbound record is missing a field or has a malformed value."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicatePhoneNumber(RecordStoreError):
    def __init__(self, phone_number: str = ""):
        super().__init__("phone_number must be unique")
        self.phone_number = phone_number
        self.message = "phone_number must be unique"


class NotFound(RecordStoreError):
    def __init__(self, entity: str, identifier=None):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.identifier = identifier
        self.message = f"{entity} not found"


class StorageError(RecordStoreError):
    """Unexpected failure from the persistence layer (connectivity, bad statement)."""
