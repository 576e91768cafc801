"""Tests for the transactional store."""

import json
import threading

import pytest
from pydantic import ValidationError as PydanticValidationError

from eventcraft.domain.access import Member, Role
from eventcraft.domain.event import EventStatus
from eventcraft.domain.shared import Err, Ok
from eventcraft.domain.task import TaskStatus
from eventcraft.infrastructure.storage import (
    Database,
    EventRepository,
    JsonStorage,
    MemberRepository,
    StorageError,
)


def _member(member_id="m1"):
    return Member(id=member_id, name="M", role=Role.MANAGER, organization_id="org")


class TestTransaction:
    """Tests for Database.transaction()."""

    def test_commit(self):
        db = Database()
        with db.transaction() as session:
            session.put("members", _member())
        assert db.count("members") == 1

    def test_exception_rolls_back_everything(self):
        db = Database()
        with pytest.raises(RuntimeError):
            with db.transaction() as session:
                session.put("members", _member("a"))
                session.put("members", _member("b"))
                raise RuntimeError("boom")
        assert db.count("members") == 0

    def test_writes_invisible_until_commit(self):
        db = Database()
        seen = []
        with db.transaction() as session:
            session.put("members", _member())
            seen.append(db.count("members"))
        # count() takes the same re-entrant lock, so it reads committed tables
        assert seen == [0]
        assert db.count("members") == 1

    def test_concurrent_writers_are_serialized(self):
        db = Database()
        with db.transaction() as session:
            session.put("members", _member("counter").model_copy(update={"name": "0"}))

        def bump():
            for _ in range(50):
                with db.transaction() as session:
                    member = session.get("members", "counter")
                    session.put("members", member.model_copy(update={"name": str(int(member.name) + 1)}))

        threads = [threading.Thread(target=bump) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        with db.transaction() as session:
            assert session.get("members", "counter").name == "200"


class TestSnapshot:
    """Tests for JSON snapshot persistence."""

    def test_round_trip(self, tmp_path):
        path = tmp_path / "store.json"
        db = Database.open(path).value
        with db.transaction() as session:
            MemberRepository(session).save(_member())

        assert json.loads(path.read_text())["members"][0]["id"] == "m1"
        reopened = Database.open(path)
        assert isinstance(reopened, Ok)
        with reopened.value.transaction() as session:
            assert MemberRepository(session).get("m1").value.role == Role.MANAGER

    def test_missing_file_is_empty_store(self, tmp_path):
        result = Database.open(tmp_path / "new.json")
        assert isinstance(result, Ok)
        assert result.value.count("members") == 0

    def test_read_only_transaction_does_not_write(self, tmp_path):
        path = tmp_path / "store.json"
        db = Database.open(path).value
        with db.transaction() as session:
            session.rows("members")
        assert not path.exists()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json")
        result = Database.open(path)
        assert isinstance(result, Err)
        assert "Invalid JSON" in result.error

    def test_invalid_rows(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text(json.dumps({"members": [{"id": "x"}]}))
        assert isinstance(Database.open(path), Err)

    def test_failed_save_raises_and_keeps_old_state(self, tmp_path):
        class FailingStorage(JsonStorage):
            def save_json(self, path, data, indent=2):
                return Err("disk full")

        db = Database(path=tmp_path / "store.json", storage=FailingStorage())
        with pytest.raises(StorageError):
            with db.transaction() as session:
                session.put("members", _member())
        assert db.count("members") == 0


class TestStoredRows:
    """Rows handed out by the store cannot change committed state."""

    def test_event_graph_is_read_only(self, db, wedding_event):
        with pytest.raises(PydanticValidationError):
            wedding_event.event.status = EventStatus.CANCELLED

        task = wedding_event.all_tasks()[0]
        with pytest.raises(PydanticValidationError):
            task.status = TaskStatus.IN_PROGRESS
        with pytest.raises(AttributeError):
            task.dependency_ids.append("elsewhere")

        with db.transaction() as session:
            events = EventRepository(session)
            assert events.get(wedding_event.event.id).value.status == EventStatus.PLANNING
            assert events.get_task(task.id).value.status == TaskStatus.PENDING

    def test_member_is_read_only(self, db):
        with db.transaction() as session:
            admin = MemberRepository(session).get("admin").value
        with pytest.raises(PydanticValidationError):
            admin.role = Role.CLIENT
        with db.transaction() as session:
            assert MemberRepository(session).get("admin").value.role == Role.ADMINISTRATOR
