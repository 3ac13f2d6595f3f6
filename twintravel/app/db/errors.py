"""Exceptions raised by document store implementations."""


class DocumentStoreError(Exception):
    """Base class for document store failures."""


class DocumentNotFoundError(DocumentStoreError):
    """No document exists for the (partition key, id) pair."""

    def __init__(self, partition_key: str, item_id: str) -> None:
        super().__init__(f"document {item_id} not found in partition {partition_key}")
        self.partition_key = partition_key
        self.item_id = item_id


class DocumentConflictError(DocumentStoreError):
    """A document with the same (partition key, id) already exists."""

    def __init__(self, partition_key: str, item_id: str) -> None:
        super().__init__(f"document {item_id} already exists in partition {partition_key}")
        self.partition_key = partition_key
        self.item_id = item_id


class PreconditionFailedError(DocumentStoreError):
    """The stored revision no longer matches the one the write was based on."""

    def __init__(self, item_id: str, expected: int, actual: int) -> None:
        super().__init__(
            f"document {item_id} revision mismatch: expected {expected}, found {actual}"
        )
        self.item_id = item_id
        self.expected = expected
        self.actual = actual
