"""Interfaces for the external services the sync engine talks to.

Concrete clients (a hosted document database, an object store, an identity
provider) live outside this package and are passed in by the caller.
"""

from collections.abc import Callable
from typing import Any, Protocol

from .models import IdentityChange

IdentityListener = Callable[[IdentityChange], None]
Unsubscribe = Callable[[], None]


class IdentityProvider(Protocol):
    """Source of the signed-in user."""

    def current_user(self) -> str | None: ...
    def subscribe(self, listener: IdentityListener) -> Unsubscribe: ...


class DocumentStore(Protocol):
    """Per-user collection of item documents.

    Field dicts use store-native timestamps (``datetime``) and omit optional
    fields instead of writing null.
    """

    async def get_all(self, user_id: str) -> list[tuple[str, dict[str, Any]]]: ...
    async def insert(self, user_id: str, fields: dict[str, Any]) -> str: ...
    async def update(self, user_id: str, document_id: str, fields: dict[str, Any]) -> None: ...
    async def delete(self, user_id: str, document_id: str) -> None: ...


class BlobStore(Protocol):
    """Binary image storage addressed by URL."""

    async def upload(
        self,
        user_id: str,
        data: bytes,
        content_type: str,
        folder: str = "inventory",
    ) -> str: ...
    async def delete(self, url: str) -> None: ...
