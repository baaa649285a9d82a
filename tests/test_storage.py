"""Tests for snapshot storage and the in-memory sync backend."""

import asyncio
import json
from uuid import uuid4

import pytest

from household_finance.models import (
    ActiveModal,
    AuditEvent,
    AuditEventType,
    Goal,
    ModalKind,
    Theme,
)
from household_finance.services.storage import (
    CorruptSnapshotError,
    InMemoryAuditStorage,
    InMemoryStateStorage,
    JsonFileStateStorage,
)
from household_finance.services.sync import InMemorySyncBackend, NotLoggedInError


class TestJsonFileStateStorage:

    def test_missing_file_loads_nothing(self, tmp_path):
        storage = JsonFileStateStorage(tmp_path / "state.json")
        assert asyncio.run(storage.load_state()) is None

    def test_save_and_load(self, tmp_path, make_state, make_transaction):
        storage = JsonFileStateStorage(tmp_path / "nested" / "state.json")
        state = make_state(
            transactions=(make_transaction("t1", tags=("food",)),),
            goals=(Goal(id="g1", name="Car", target_amount=1000),),
            theme=Theme.NEON,
            active_modal=ActiveModal(kind=ModalKind.SMART_SCAN),
            selected_transactions=frozenset({"t1"}),
        )

        asyncio.run(storage.save_state(state))
        loaded = asyncio.run(storage.load_state())

        assert loaded.transactions == state.transactions
        assert loaded.goals == state.goals
        assert loaded.theme == Theme.NEON
        assert loaded.filters == state.filters
        assert loaded.active_modal is None
        assert loaded.selected_transactions == frozenset()

    def test_file_holds_no_ephemeral_fields(self, tmp_path, make_state):
        path = tmp_path / "state.json"
        asyncio.run(JsonFileStateStorage(path).save_state(make_state()))

        data = json.loads(path.read_text(encoding="utf-8"))
        assert "active_modal" not in data
        assert "selected_transactions" not in data
        assert "sync_status" not in data
        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]

    def test_unparseable_file_is_corrupt(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CorruptSnapshotError):
            asyncio.run(JsonFileStateStorage(path).load_state())

    def test_wrong_shape_is_corrupt(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"transactions": [{"id": "t1"}]}), encoding="utf-8")
        with pytest.raises(CorruptSnapshotError):
            asyncio.run(JsonFileStateStorage(path).load_state())

    def test_clear(self, tmp_path, make_state):
        storage = JsonFileStateStorage(tmp_path / "state.json")
        asyncio.run(storage.save_state(make_state()))
        assert asyncio.run(storage.clear()) is True
        assert asyncio.run(storage.clear()) is False
        assert asyncio.run(storage.load_state()) is None

    def test_concurrent_saves_do_not_collide(self, tmp_path, make_state, make_transaction):
        storage = JsonFileStateStorage(tmp_path / "state.json")
        states = [
            make_state(transactions=tuple(make_transaction(f"t{j}") for j in range(i + 1)))
            for i in range(4)
        ]

        async def save_all():
            for _ in range(10):
                await asyncio.gather(*(storage.save_state(s) for s in states))

        asyncio.run(save_all())

        loaded = asyncio.run(storage.load_state())
        assert 1 <= len(loaded.transactions) <= 4
        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]


class TestInMemoryStorage:

    def test_round_trip_drops_ephemeral_fields(self, make_state):
        storage = InMemoryStateStorage()
        assert asyncio.run(storage.load_state()) is None

        asyncio.run(storage.save_state(make_state(selected_transactions=frozenset({"x"}))))
        loaded = asyncio.run(storage.load_state())

        assert storage.save_count == 1
        assert loaded.selected_transactions == frozenset()

    def test_audit_queries(self):
        storage = InMemoryAuditStorage()
        correlation_id = uuid4()
        first = AuditEvent(event_type=AuditEventType.STATE_SAVED, description="one", correlation_id=correlation_id)
        second = AuditEvent(event_type=AuditEventType.STATE_SAVED, description="two")
        asyncio.run(storage.append_event(first))
        asyncio.run(storage.append_event(second))

        assert asyncio.run(storage.get_events_by_correlation_id(correlation_id)) == [first]
        assert asyncio.run(storage.get_recent_events(limit=1)) == [second]

    def test_audit_cap_keeps_newest_events(self):
        storage = InMemoryAuditStorage(max_events=2)
        events = [
            AuditEvent(event_type=AuditEventType.INTENT_APPLIED, description=f"intent {i}")
            for i in range(5)
        ]
        for event in events:
            asyncio.run(storage.append_event(event))

        assert list(storage.events) == events[-2:]
        assert asyncio.run(storage.get_recent_events()) == [events[4], events[3]]


class TestInMemorySyncBackend:

    def test_push_requires_login(self, make_state):
        backend = InMemorySyncBackend()
        with pytest.raises(NotLoggedInError):
            asyncio.run(backend.push(make_state().to_synced()))

    def test_push_then_pull(self, make_state, make_transaction):
        backend = InMemorySyncBackend(principal="abc")
        assert asyncio.run(backend.login()) == "abc"
        assert asyncio.run(backend.pull()) is None

        snapshot = make_state(transactions=(make_transaction("t1"),)).to_synced()
        asyncio.run(backend.push(snapshot))

        assert asyncio.run(backend.pull()) == snapshot
