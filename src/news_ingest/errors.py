from __future__ import annotations


class IngestError(Exception):
    """Base class for ingestion failures."""


class SourceError(IngestError):
    """A source could not be reached or returned an unusable payload."""

    def __init__(self, kind: str, source: str, message: str = "") -> None:
        self.kind = kind
        self.source = source
        self.message = message
        super().__init__(f"{source}: {kind}: {message}" if message else f"{source}: {kind}")

    def to_note(self) -> str:
        safe = (self.message or "").replace("\n", " ").replace("|", " ").strip()
        return f"source_error:{self.kind}:{safe}" if safe else f"source_error:{self.kind}"


class MalformedItemError(IngestError):
    """A raw item is missing the fields required to build a record."""


class StorageError(IngestError):
    """The article store rejected a read or write."""


class DuplicateUrlError(StorageError):
    """An update tried to move a record onto a URL that already exists."""
