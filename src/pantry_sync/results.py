"""Result values returned by the sync coordinator."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .errors import SyncError

T = TypeVar("T")


@dataclass
class SyncResult(Generic[T]):
    """Outcome of a coordinator operation.

    Exactly one of ``value`` / ``error`` is meaningful: ``error`` is None on
    success. ``warnings`` holds non-fatal failures that did not stop the
    operation, and ``orphaned_image_url`` is set when an image was uploaded but
    the document write that should have referenced it failed.
    """

    value: T | None = None
    error: SyncError | None = None
    warnings: list[SyncError] = field(default_factory=list)
    orphaned_image_url: str | None = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.stale

    def unwrap(self) -> T:
        """Return the value, raising the failure if there is one.

        The raised error carries this result's ``orphaned_image_url``.
        """
        if self.error is not None:
            if self.orphaned_image_url is not None:
                self.error.orphaned_image_url = self.orphaned_image_url
            raise self.error
        return self.value  # type: ignore[return-value]

    @classmethod
    def success(cls, value: T | None = None, warnings: list[SyncError] | None = None) -> "SyncResult[T]":
        return cls(value=value, warnings=list(warnings or []))

    @classmethod
    def failure(cls, error: SyncError, orphaned_image_url: str | None = None) -> "SyncResult[T]":
        return cls(error=error, orphaned_image_url=orphaned_image_url)
