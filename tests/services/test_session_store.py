"""Tests for session and profile stores."""

import sqlite3

import pytest

from lyftup_analytics.db.database import WorkoutDatabase
from lyftup_analytics.exceptions import ProfileSyncError, SessionStoreError
from lyftup_analytics.models.profile import UserProfile
from lyftup_analytics.services.base import ProfileStore, SessionStore
from lyftup_analytics.services.profile_store import DatabaseProfileStore, InMemoryProfileStore
from lyftup_analytics.services.session_store import DatabaseSessionStore, InMemorySessionStore


@pytest.fixture
def db(tmp_path):
    return WorkoutDatabase(str(tmp_path / "test.db"))


class TestInMemorySessionStore:
    """Tests for the in-memory session store."""

    def test_satisfies_protocol(self):
        assert isinstance(InMemorySessionStore(), SessionStore)
        assert isinstance(InMemoryProfileStore(), ProfileStore)

    def test_snapshot_is_a_copy(self, sample_sessions):
        store = InMemorySessionStore(sample_sessions)
        snapshot = store.current_sessions()
        snapshot.clear()
        assert len(store.current_sessions()) == 6

    def test_save_appends_then_replaces(self, make_session, days_ago):
        store = InMemorySessionStore()
        session = make_session(days_ago(1), session_id="s1")
        store.save_session(session)
        store.save_session(session.model_copy(update={"routine_name": "Renamed"}))

        sessions = store.current_sessions()
        assert len(sessions) == 1
        assert sessions[0].routine_name == "Renamed"

    def test_listeners_receive_full_list(self, sample_sessions, make_session, days_ago):
        store = InMemorySessionStore(sample_sessions)
        received = []
        store.on_sessions_changed(received.append)

        store.save_session(make_session(days_ago(3)))

        assert len(received) == 1
        assert len(received[0]) == 7

    def test_delete_unknown_id_does_not_notify(self, sample_sessions):
        store = InMemorySessionStore(sample_sessions)
        received = []
        store.on_sessions_changed(received.append)

        assert store.delete_session("missing") is False
        assert received == []

    def test_unsubscribe(self, make_session, days_ago):
        store = InMemorySessionStore()
        received = []
        unsubscribe = store.on_sessions_changed(received.append)
        unsubscribe()
        unsubscribe()
        store.save_session(make_session(days_ago(1)))
        assert received == []

    @pytest.mark.asyncio
    async def test_refresh_without_loader_renotifies(self, sample_sessions):
        store = InMemorySessionStore(sample_sessions)
        received = []
        store.on_sessions_changed(received.append)

        await store.refresh()

        assert len(received) == 1

    @pytest.mark.asyncio
    async def test_refresh_with_loader_replaces(self, sample_sessions):
        async def loader():
            return sample_sessions[:1]

        store = InMemorySessionStore(sample_sessions, loader=loader)
        await store.refresh()
        assert len(store.current_sessions()) == 1

    @pytest.mark.asyncio
    async def test_loader_failure_wrapped(self, sample_sessions):
        async def loader():
            raise TimeoutError("slow backend")

        store = InMemorySessionStore(sample_sessions, loader=loader)
        with pytest.raises(SessionStoreError):
            await store.refresh()
        assert len(store.current_sessions()) == 6


class TestDatabaseSessionStore:
    """Tests for the SQLite-backed session store."""

    def test_loads_existing_rows(self, db, sample_sessions):
        db.replace_sessions(sample_sessions)
        store = DatabaseSessionStore(db)
        assert len(store.current_sessions()) == 6

    def test_save_persists_and_notifies(self, db, make_session, days_ago):
        store = DatabaseSessionStore(db)
        received = []
        store.on_sessions_changed(received.append)

        store.save_session(make_session(days_ago(1), session_id="s1"))

        assert db.count_sessions() == 1
        assert [s.id for s in received[0]] == ["s1"]

    def test_delete(self, db, sample_sessions):
        db.replace_sessions(sample_sessions)
        store = DatabaseSessionStore(db)
        assert store.delete_session(sample_sessions[0].id) is True
        assert store.delete_session(sample_sessions[0].id) is False
        assert len(store.current_sessions()) == 5

    def test_users_are_separate(self, db, sample_sessions):
        db.replace_sessions(sample_sessions, user_id="alice")
        assert DatabaseSessionStore(db, user_id="bob").current_sessions() == []
        assert len(DatabaseSessionStore(db, user_id="alice").current_sessions()) == 6

    def test_delete_leaves_other_users(self, db, sample_sessions):
        db.replace_sessions(sample_sessions, user_id="alice")
        db.replace_sessions(sample_sessions, user_id="bob")

        assert DatabaseSessionStore(db, user_id="alice").delete_session(sample_sessions[0].id) is True

        assert db.count_sessions("alice") == 5
        assert db.count_sessions("bob") == 6

    @pytest.mark.asyncio
    async def test_refresh_sees_external_writes(self, db, sample_sessions):
        store = DatabaseSessionStore(db)
        received = []
        store.on_sessions_changed(received.append)

        db.replace_sessions(sample_sessions)
        await store.refresh()

        assert len(store.current_sessions()) == 6
        assert len(received[0]) == 6

    @pytest.mark.asyncio
    async def test_refresh_failure_wrapped(self, db):
        store = DatabaseSessionStore(db)
        with sqlite3.connect(db.db_path) as conn:
            conn.execute("DROP TABLE workout_sessions")

        with pytest.raises(SessionStoreError) as exc_info:
            await store.refresh()
        assert "db_path" in exc_info.value.details


class TestDatabaseProfileStore:
    """Tests for the SQLite-backed profile store."""

    @pytest.mark.asyncio
    async def test_save_and_read(self, db):
        store = DatabaseProfileStore(db)
        assert store.current_profile() is None

        await store.save_profile(UserProfile(id="default", username="lifter", total_workouts=3))

        profile = store.current_profile()
        assert profile.username == "lifter"
        assert profile.total_workouts == 3

    @pytest.mark.asyncio
    async def test_write_failure_wrapped(self, db):
        store = DatabaseProfileStore(db)
        with sqlite3.connect(db.db_path) as conn:
            conn.execute("DROP TABLE user_profile")

        with pytest.raises(ProfileSyncError):
            await store.save_profile(UserProfile(id="default"))
