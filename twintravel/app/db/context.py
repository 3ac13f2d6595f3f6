"""Request context for partition scoping."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TwinContext:
    """Identity of the Twin that owns every record touched by a request.

    The twin id is the partition key of the document store, so every read and
    write is addressed through it.
    """

    twin_id: str
