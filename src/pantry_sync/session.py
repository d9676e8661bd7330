"""Binds identity changes to loading and clearing the item cache."""

import asyncio
import logging

from .coordinator import SyncCoordinator
from .models import IdentityChange, InventoryItem
from .results import SyncResult
from .stores import IdentityProvider, Unsubscribe

logger = logging.getLogger(__name__)


class SessionBinding:
    """Keeps the cache in step with the signed-in user.

    Every identity event bumps a session token. A load remembers the token it
    started under and is discarded if the token has moved on by the time the
    remote read returns, so a slow load for a previous user can never fill the
    cache after a newer sign-in or sign-out.

    Must be used from within a running event loop: sign-in events schedule the
    load as a task on that loop.
    """

    def __init__(self, identity: IdentityProvider, coordinator: SyncCoordinator):
        self.identity = identity
        self.coordinator = coordinator
        self.cache = coordinator.cache
        self.user_id: str | None = None
        self._token = 0
        self._tasks: set[asyncio.Task] = set()
        self._unsubscribe: Unsubscribe | None = None
        self.last_result: SyncResult[list[InventoryItem]] | None = None

    @property
    def token(self) -> int:
        return self._token

    @property
    def is_loading(self) -> bool:
        return any(not t.done() for t in self._tasks)

    def start(self) -> None:
        """Subscribe to identity changes and load for the current user, if any."""
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self.identity.subscribe(self.handle_change)
        current = self.identity.current_user()
        if current is not None:
            self.handle_change(IdentityChange(previous=None, next=current))

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def handle_change(self, change: IdentityChange) -> None:
        """React to one identity event."""
        self._token += 1
        self.user_id = change.next

        if change.next is None:
            self.cache.clear()
            logger.info("Signed out; inventory cache cleared")
            return

        self.cache.bind(change.next)
        task = asyncio.get_running_loop().create_task(self._load(self._token, change.next))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _load(self, token: int, user_id: str) -> SyncResult[list[InventoryItem]]:
        result = await self.coordinator.fetch(user_id)
        if token != self._token:
            logger.warning(
                "Discarding inventory load for %s (session %d superseded by %d)",
                user_id,
                token,
                self._token,
            )
            result.stale = True
            return result

        if result.ok:
            self.cache.replace_all(result.value or [], user_id=user_id)
            logger.info("Loaded %d inventory items", len(result.value or []))
        self.last_result = result
        return result

    async def wait_idle(self) -> None:
        """Wait until no load is in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def reload(self) -> SyncResult[list[InventoryItem]]:
        """Reload the active user's collection under the current session."""
        if self.user_id is None:
            return await self.coordinator.fetch(None)
        return await self._load(self._token, self.user_id)
