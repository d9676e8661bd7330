"""Typed failures for inventory synchronization.

Remote collaborators may raise anything (timeouts, transport errors, permission
errors). The coordinator catches those at the call boundary and returns one of
the ``SyncError`` subclasses below, keeping the original exception as ``cause``.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories surfaced to callers."""

    NOT_AUTHENTICATED = "NotAuthenticated"
    MISSING_IDENTIFIER = "MissingIdentifier"
    REMOTE_WRITE_FAILED = "RemoteWriteFailed"
    REMOTE_READ_FAILED = "RemoteReadFailed"
    IMAGE_UPLOAD_FAILED = "ImageUploadFailed"
    IMAGE_DELETE_FAILED = "ImageDeleteFailed"
    DECODE_FAILED = "DecodeFailed"
    ITEM_NOT_FOUND = "ItemNotFound"


class SyncError(Exception):
    """Base class for all synchronization failures."""

    kind: ErrorKind
    fatal = True

    def __init__(self, message: str, cause: BaseException | None = None):
        self.cause = cause
        # uploaded image left behind by the failed write, if any
        self.orphaned_image_url: str | None = None
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class NotAuthenticatedError(SyncError):
    """Raised when an operation is attempted with no active user."""

    kind = ErrorKind.NOT_AUTHENTICATED

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class MissingIdentifierError(SyncError):
    """Raised when an item that was never persisted is updated or deleted."""

    kind = ErrorKind.MISSING_IDENTIFIER

    def __init__(self, item_name: str):
        self.item_name = item_name
        super().__init__(f"Item '{item_name}' has no identifier")


class RemoteWriteError(SyncError):
    kind = ErrorKind.REMOTE_WRITE_FAILED


class RemoteReadError(SyncError):
    kind = ErrorKind.REMOTE_READ_FAILED


class ImageUploadError(SyncError):
    kind = ErrorKind.IMAGE_UPLOAD_FAILED


class ImageDeleteError(SyncError):
    """Image cleanup failed after the owning document was removed."""

    kind = ErrorKind.IMAGE_DELETE_FAILED
    fatal = False

    def __init__(self, image_url: str, cause: BaseException | None = None):
        self.image_url = image_url
        super().__init__(f"Failed to delete image {image_url}", cause)


class DecodeError(SyncError):
    """A remote document could not be turned into an item."""

    kind = ErrorKind.DECODE_FAILED

    def __init__(self, document_id: str, cause: BaseException | None = None):
        self.document_id = document_id
        super().__init__(f"Malformed inventory document '{document_id}'", cause)


class ItemNotFoundError(SyncError):
    """Raised when an item id is not present in the local cache."""

    kind = ErrorKind.ITEM_NOT_FOUND

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Inventory item not found: {item_id}")
