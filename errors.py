"""Exceptions raised by the local store."""

from __future__ import annotations


class StoreError(Exception):
    """Base exception for store errors."""
    pass


class StorageInitError(StoreError):
    """The store could not be opened or the schema could not be created."""
    pass


class StoreNotInitializedError(StoreError):
    """An operation was attempted before ``init()`` or after ``close()``."""
    pass


class ConstraintViolation(StoreError):
    """A write was rejected by a table constraint."""
    pass


class DuplicateKeyError(ConstraintViolation):
    """Insert with an id that already exists."""

    def __init__(self, table: str, key: str):
        self.table = table
        self.key = key
        super().__init__(f"{table}: id {key!r} already exists")


class TransactionFailure(StoreError):
    """A multi-statement write failed and was rolled back."""
    pass


class ValidationError(StoreError, ValueError):
    """A record failed boundary validation before reaching the database."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")
