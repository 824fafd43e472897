class StoreError(Exception):
    """Base class for every failure raised by the record store."""


class StorageError(StoreError):
    pass


class StorageUnavailable(StorageError):
    """The storage medium could not be read, or held a blob we cannot decode."""


class StorageWriteError(StorageError):
    """A write to the storage medium was rejected or lost."""


class BookNotFound(StoreError):
    def __init__(self, book_id: str):
        super().__init__(f"Book {book_id} not found")
        self.book_id = book_id


class ValidationError(StoreError):
    """A required field was empty or an enumerated value was out of range."""
