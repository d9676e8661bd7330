"""Tests for binding identity changes to the cache."""

import asyncio

from pantry_sync.codec import encode_item
from pantry_sync.local_store import LocalIdentityProvider
from pantry_sync.session import SessionBinding
from tests.fakes import make_item


def _seed(documents, user_id, *names):
    documents.seed(
        user_id,
        {f"{user_id}-{n}": encode_item(make_item(name)) for n, name in enumerate(names)},
    )


class TestSignInOut:
    """Tests for ordinary sign-in and sign-out."""

    def test_sign_in_loads_collection(self, session, identity, documents, cache):
        _seed(documents, "u1", "Milk", "Eggs")

        async def scenario():
            session.start()
            identity.sign_in("u1")
            assert session.is_loading
            await session.wait_idle()

        asyncio.run(scenario())

        assert sorted(i.name for i in cache.all()) == ["Eggs", "Milk"]
        assert cache.user_id == "u1"
        assert session.user_id == "u1"
        assert session.last_result.ok

    def test_sign_out_clears_immediately(self, session, identity, documents, cache):
        _seed(documents, "u1", "Milk")

        async def scenario():
            session.start()
            identity.sign_in("u1")
            await session.wait_idle()
            identity.sign_out()
            assert len(cache) == 0

        asyncio.run(scenario())

        assert cache.user_id is None
        assert session.user_id is None

    def test_switch_user_clears_before_load(self, session, identity, documents, cache):
        _seed(documents, "u1", "Milk")
        _seed(documents, "u2", "Bread")
        documents.gates["u2"] = asyncio.Event()

        async def scenario():
            session.start()
            identity.sign_in("u1")
            await session.wait_idle()
            identity.sign_in("u2")
            assert len(cache) == 0
            documents.gates["u2"].set()
            await session.wait_idle()

        asyncio.run(scenario())

        assert [i.name for i in cache.all()] == ["Bread"]

    def test_failed_load_reports_error(self, session, identity, documents, cache):
        documents.fail_on.add("get_all")

        async def scenario():
            session.start()
            identity.sign_in("u1")
            await session.wait_idle()

        asyncio.run(scenario())

        assert not session.last_result.ok
        assert len(cache) == 0


class TestStaleLoads:
    """Tests for loads that finish after the session moved on."""

    def test_slow_load_for_previous_user_is_discarded(self, session, identity, documents, cache):
        """A late response for u1 never replaces u2's items."""
        _seed(documents, "u1", "Milk")
        _seed(documents, "u2", "Bread")
        gate = asyncio.Event()
        documents.gates["u1"] = gate

        async def scenario():
            session.start()
            identity.sign_in("u1")
            stale_task = next(iter(session._tasks))
            identity.sign_in("u2")
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            assert [i.name for i in cache.all()] == ["Bread"]
            gate.set()
            return await stale_task

        stale = asyncio.run(scenario())

        assert stale.stale
        assert not stale.ok
        assert [i.name for i in cache.all()] == ["Bread"]
        assert cache.user_id == "u2"

    def test_load_finishing_after_sign_out_is_discarded(self, session, identity, documents, cache):
        _seed(documents, "u1", "Milk")
        gate = asyncio.Event()
        documents.gates["u1"] = gate

        async def scenario():
            session.start()
            identity.sign_in("u1")
            identity.sign_out()
            gate.set()
            await session.wait_idle()

        asyncio.run(scenario())

        assert len(cache) == 0
        assert session.last_result is None

    def test_every_event_advances_token(self, session, identity):
        async def scenario():
            session.start()
            identity.sign_in("u1")
            identity.sign_out()
            identity.sign_in("u2")
            await session.wait_idle()

        asyncio.run(scenario())
        assert session.token == 3


class TestLifecycle:

    def test_start_loads_current_user(self, coordinator, documents, cache):
        _seed(documents, "u1", "Milk")
        identity = LocalIdentityProvider("u1")
        session = SessionBinding(identity, coordinator)

        async def scenario():
            session.start()
            await session.wait_idle()

        asyncio.run(scenario())

        assert [i.name for i in cache.all()] == ["Milk"]

    def test_stop_unsubscribes(self, session, identity, cache):
        async def scenario():
            session.start()
            session.stop()
            identity.sign_in("u1")
            assert not session.is_loading

        asyncio.run(scenario())

        assert session.user_id is None
        assert session.token == 0

    def test_reload(self, session, identity, documents, cache):
        _seed(documents, "u1", "Milk")

        async def scenario():
            session.start()
            identity.sign_in("u1")
            await session.wait_idle()
            _seed(documents, "u1", "Milk", "Eggs")
            return await session.reload()

        result = asyncio.run(scenario())

        assert result.ok
        assert sorted(i.name for i in cache.all()) == ["Eggs", "Milk"]

    def test_reload_without_user(self, session):
        result = asyncio.run(session.reload())
        assert not result.ok


class TestWritesAcrossSessions:
    """A write still in flight when the session changes never reaches the new cache."""

    def test_add_finishing_after_switch_to_other_user(
        self, session, identity, coordinator, documents, cache
    ):
        _seed(documents, "u2", "Bread")

        async def scenario():
            session.start()
            identity.sign_in("u1")
            await session.wait_idle()
            documents.write_gate = asyncio.Event()
            add = asyncio.create_task(coordinator.add("u1", make_item("Secret")))
            await asyncio.sleep(0)
            identity.sign_in("u2")
            await session.wait_idle()
            documents.write_gate.set()
            return await add

        result = asyncio.run(scenario())

        assert result.ok
        assert result.value.id in documents.collections["u1"]
        assert cache.user_id == "u2"
        assert [i.name for i in cache.all()] == ["Bread"]

    def test_add_finishing_after_sign_out(self, session, identity, coordinator, documents, cache):
        async def scenario():
            session.start()
            identity.sign_in("u1")
            await session.wait_idle()
            documents.write_gate = asyncio.Event()
            add = asyncio.create_task(coordinator.add("u1", make_item("Secret")))
            await asyncio.sleep(0)
            identity.sign_out()
            documents.write_gate.set()
            return await add

        result = asyncio.run(scenario())

        assert result.ok
        assert cache.user_id is None
        assert len(cache) == 0

    def test_update_finishing_after_switch_to_other_user(
        self, session, identity, coordinator, documents, cache
    ):
        _seed(documents, "u2", "Bread")

        async def scenario():
            session.start()
            identity.sign_in("u1")
            await session.wait_idle()
            stored = (await coordinator.add("u1", make_item("Milk", quantity=1))).unwrap()
            documents.write_gate = asyncio.Event()
            update = asyncio.create_task(
                coordinator.update("u1", stored.model_copy(update={"quantity": 3}))
            )
            await asyncio.sleep(0)
            identity.sign_in("u2")
            await session.wait_idle()
            documents.write_gate.set()
            return await update

        result = asyncio.run(scenario())

        assert result.ok
        assert [i.name for i in cache.all()] == ["Bread"]

    def test_sign_in_binds_cache_before_load(self, session, identity, documents, cache):
        documents.gates["u1"] = asyncio.Event()

        async def scenario():
            session.start()
            identity.sign_in("u1")
            assert cache.user_id == "u1"
            documents.gates["u1"].set()
            await session.wait_idle()

        asyncio.run(scenario())
