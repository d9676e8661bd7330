"""File-backed stand-ins for the remote document store, blob store and identity provider.

These keep everything under one data directory so the CLI and tests can run
the full sync flow without network services:

    {data_dir}/users/{user_id}/inventory.json
    {data_dir}/users/{user_id}/images/{folder}_{uuid}.jpg
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any
from urllib.parse import unquote, urlparse
from uuid import uuid4

from .codec import TIMESTAMP_FIELDS
from .models import IdentityChange
from .stores import IdentityListener, Unsubscribe

logger = logging.getLogger(__name__)


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for document timestamps."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


def json_decoder(data: dict[str, Any]) -> dict[str, Any]:
    """Decode timestamp fields back to datetime objects."""
    for key in TIMESTAMP_FIELDS:
        value = data.get(key)
        if isinstance(value, str):
            try:
                data[key] = datetime.fromisoformat(value)
            except ValueError:
                pass
    return data


class DocumentNotFoundError(LookupError):
    """Raised when a document id does not exist in a user's collection."""

    def __init__(self, user_id: str, document_id: str):
        self.user_id = user_id
        self.document_id = document_id
        super().__init__(f"Document '{document_id}' not found for user '{user_id}'")


class JSONDocumentStore:
    """Per-user item documents kept in one JSON file per user."""

    def __init__(self, data_dir: Path | None = None):
        """Initialize document store.

        Args:
            data_dir: Directory for data files. Defaults to ./data
        """
        self.data_dir = data_dir or Path.cwd() / "data"
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _collection_path(self, user_id: str) -> Path:
        """Path to a user's inventory file."""
        return self.data_dir / "users" / user_id / "inventory.json"

    def _read(self, user_id: str) -> dict[str, dict[str, Any]]:
        path = self._collection_path(user_id)
        if not path.exists():
            return {}
        with open(path) as f:
            return json.load(f, object_hook=json_decoder)

    def _write(self, user_id: str, documents: dict[str, dict[str, Any]]) -> None:
        path = self._collection_path(user_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(documents, f, cls=JSONEncoder, indent=2)

    async def get_all(self, user_id: str) -> list[tuple[str, dict[str, Any]]]:
        return list(self._read(user_id).items())

    async def insert(self, user_id: str, fields: dict[str, Any]) -> str:
        documents = self._read(user_id)
        document_id = uuid4().hex
        documents[document_id] = dict(fields)
        self._write(user_id, documents)
        return document_id

    async def update(self, user_id: str, document_id: str, fields: dict[str, Any]) -> None:
        documents = self._read(user_id)
        if document_id not in documents:
            raise DocumentNotFoundError(user_id, document_id)
        documents[document_id] = dict(fields)
        self._write(user_id, documents)

    async def delete(self, user_id: str, document_id: str) -> None:
        documents = self._read(user_id)
        if documents.pop(document_id, None) is None:
            raise DocumentNotFoundError(user_id, document_id)
        self._write(user_id, documents)


class LocalBlobStore:
    """Images written as files and addressed by ``file://`` URLs."""

    def __init__(self, data_dir: Path | None = None):
        self.data_dir = (data_dir or Path.cwd() / "data").resolve()
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _images_dir(self, user_id: str) -> Path:
        return self.data_dir / "users" / user_id / "images"

    def _path_for_url(self, url: str) -> Path:
        parsed = urlparse(url)
        if parsed.scheme != "file":
            raise ValueError(f"Not a local image URL: {url}")
        path = Path(unquote(parsed.path))
        if self.data_dir not in path.parents:
            raise ValueError(f"Image URL outside of {self.data_dir}: {url}")
        return path

    async def upload(
        self,
        user_id: str,
        data: bytes,
        content_type: str,
        folder: str = "inventory",
    ) -> str:
        if not data:
            raise ValueError("Image data is empty")
        images_dir = self._images_dir(user_id)
        images_dir.mkdir(parents=True, exist_ok=True)
        path = images_dir / f"{folder}_{uuid4()}.jpg"
        path.write_bytes(data)
        logger.debug("Stored %d bytes (%s) at %s", len(data), content_type, path)
        return path.as_uri()

    async def delete(self, url: str) -> None:
        path = self._path_for_url(url)
        path.unlink()


class LocalIdentityProvider:
    """In-process identity with explicit sign-in and sign-out."""

    def __init__(self, user_id: str | None = None):
        self._user_id = user_id
        self._listeners: list[IdentityListener] = []

    def current_user(self) -> str | None:
        return self._user_id

    def subscribe(self, listener: IdentityListener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, previous: str | None) -> None:
        change = IdentityChange(previous=previous, next=self._user_id)
        for listener in list(self._listeners):
            listener(change)

    def sign_in(self, user_id: str) -> None:
        previous, self._user_id = self._user_id, user_id
        self._notify(previous)

    def sign_out(self) -> None:
        previous, self._user_id = self._user_id, None
        self._notify(previous)
