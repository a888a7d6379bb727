from __future__ import annotations


class ContentError(Exception):
    """Base class for content store failures; `status` is the HTTP mapping."""

    status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ContentError):
    status = 400


class NotFound(ContentError):
    status = 404


class Conflict(ContentError):
    status = 400


class ParseError(ContentError):
    status = 500


class StorageError(ContentError):
    """Disk failure while reading or writing a document."""

    status = 500


class PartialFailure(ContentError):
    """One item of a batch read that could not be loaded and was skipped."""

    def __init__(self, kind: str, item_id: str, cause: Exception) -> None:
        super().__init__(f"Failed to load {kind} {item_id}: {cause}")
        self.kind = kind
        self.item_id = item_id
        self.cause = cause
