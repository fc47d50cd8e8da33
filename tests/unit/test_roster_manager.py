import pytest

from devspace.contracts.dto import EngineerCreate, Specialty, TaskStatus
from devspace.errors import (
    NotFound,
    StorageUnavailable,
    UnassignmentNotConfirmed,
    ValidationError,
)
from devspace.managers import RosterManager, TaskManager
from devspace.store import ENGINEERS, TASKS


class EngineerDeleteFails:
    """Store wrapper whose engineer deletes fail like an unwritable medium."""

    def __init__(self, inner):
        self.inner = inner

    def get(self, collection):
        return self.inner.get(collection)

    def put(self, collection, record):
        self.inner.put(collection, record)

    def delete(self, collection, record_id):
        if collection == ENGINEERS:
            raise StorageUnavailable("Cannot write engineers")
        return self.inner.delete(collection, record_id)


def engineer_data(name="Alex", **overrides):
    data = {
        "name": name,
        "personality": "Calm and methodical",
        "avatar_url": "https://models.readyplayer.me/abc.glb",
        "voice_id": "voice-1",
        "specialty": "backend",
    }
    data.update(overrides)
    return data


class TestCreate:
    def test_create_and_read_back(self, roster):
        created = roster.create(engineer_data())

        assert created.id == "id1"
        assert created.specialty == Specialty.BACKEND
        assert roster.get(created.id) == created
        assert roster.list() == [created]

    def test_accepts_model_input(self, roster):
        created = roster.create(EngineerCreate(name="Sam"))
        assert created.name == "Sam"
        assert created.personality is None

    def test_empty_optionals_become_none(self, roster):
        created = roster.create(engineer_data(personality="", avatar_url="  ", specialty=""))

        assert created.personality is None
        assert created.avatar_url is None
        assert created.specialty is None

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"name": ""}, "name"),
            ({"name": "x" * 101}, "name"),
            ({"personality": "x" * 501}, "personality"),
            ({"voice_id": "x" * 101}, "voice_id"),
            ({"avatar_url": "not a url"}, "avatar_url"),
            ({"specialty": "wizard"}, "specialty"),
        ],
    )
    def test_invalid_fields(self, roster, store, overrides, field):
        with pytest.raises(ValidationError, match=field):
            roster.create(engineer_data(**overrides))

        assert store.get(ENGINEERS) == []

    def test_invalid_url_message(self, roster):
        with pytest.raises(ValidationError, match="Must be a valid URL"):
            roster.create(engineer_data(avatar_url="ftp//nope"))

    def test_roster_cap(self, roster, store):
        for name in ("Alex", "Sam", "Jordan", "Casey"):
            roster.create(engineer_data(name))

        with pytest.raises(ValidationError, match="Maximum of 4 engineers allowed"):
            roster.create(engineer_data("Riley"))

        assert len(store.get(ENGINEERS)) == 4

    def test_cap_reported_before_field_errors(self, roster):
        for name in ("A", "B", "C", "D"):
            roster.create(engineer_data(name))

        with pytest.raises(ValidationError, match="Maximum"):
            roster.create(engineer_data(name=""))

    def test_list_oldest_first(self, roster):
        names = ["Alex", "Sam", "Jordan"]
        for name in names:
            roster.create(engineer_data(name))

        assert [e.name for e in roster.list()] == names


class TestUpdate:
    def test_update_replaces_mutable_fields(self, roster):
        created = roster.create(engineer_data())

        updated = roster.update(created.id, {"name": "Alexandra", "specialty": "frontend"})

        assert updated.id == created.id
        assert updated.created_at == created.created_at
        assert updated.name == "Alexandra"
        assert updated.specialty == Specialty.FRONTEND
        # Full replace: omitted fields are cleared
        assert updated.personality is None
        assert roster.get(created.id) == updated

    def test_update_missing(self, roster):
        with pytest.raises(NotFound):
            roster.update("nope", engineer_data())

    def test_update_invalid_keeps_record(self, roster):
        created = roster.create(engineer_data())

        with pytest.raises(ValidationError):
            roster.update(created.id, engineer_data(name=""))

        assert roster.get(created.id) == created


class TestDelete:
    def test_delete_without_tasks(self, roster, store):
        created = roster.create(engineer_data())

        assert roster.delete(created.id) == []
        assert store.get(ENGINEERS) == []

    def test_delete_missing(self, roster):
        with pytest.raises(NotFound):
            roster.delete("nope")

    def test_delete_requires_confirmation_when_tasks_assigned(self, roster, tasks, store):
        engineer = roster.create(engineer_data())
        tasks.create({"description": "one", "engineer_id": engineer.id})
        tasks.create({"description": "two", "engineer_id": engineer.id})

        with pytest.raises(UnassignmentNotConfirmed) as exc_info:
            roster.delete(engineer.id)

        assert exc_info.value.task_count == 2
        assert "This engineer has 2 task(s) assigned" in exc_info.value.message
        assert len(store.get(ENGINEERS)) == 1
        assert all(t.engineer_id == engineer.id for t in tasks.list())

    def test_delete_unassigns_tasks(self, roster, tasks, store):
        alex = roster.create(engineer_data("Alex"))
        sam = roster.create(engineer_data("Sam"))
        for i in range(3):
            tasks.create({"description": f"alex {i}", "engineer_id": alex.id})
        other = tasks.create({"description": "sam", "engineer_id": sam.id})

        unassigned = roster.delete(alex.id, confirm_unassign=True)

        assert len(unassigned) == 3
        assert [e.id for e in roster.list()] == [sam.id]
        remaining = {t.id: t for t in tasks.list()}
        assert len(remaining) == 4
        assert sum(1 for t in remaining.values() if t.engineer_id is None) == 3
        assert remaining[other.id].engineer_id == sam.id
        assert not any(r["engineer_id"] == alex.id for r in store.get(TASKS))

    def test_unassigned_tasks_keep_status(self, roster, tasks):
        engineer = roster.create(engineer_data())
        task = tasks.create(
            {"description": "busy", "engineer_id": engineer.id, "status": TaskStatus.RUNNING}
        )

        roster.delete(engineer.id, confirm_unassign=True)

        assert tasks.get(task.id).status == TaskStatus.RUNNING
        assert tasks.get(task.id).engineer_id is None

    def test_failed_engineer_delete_leaves_tasks_unassigned(self, store, clock, ids):
        failing = EngineerDeleteFails(store)
        tasks = TaskManager(failing, clock=clock, id_factory=ids)
        roster = RosterManager(failing, tasks, clock=clock, id_factory=ids)
        engineer = roster.create(engineer_data())
        for i in range(2):
            tasks.create({"description": f"task {i}", "engineer_id": engineer.id})

        with pytest.raises(StorageUnavailable):
            roster.delete(engineer.id, confirm_unassign=True)

        assert roster.get(engineer.id) == engineer
        assert all(t.engineer_id is None for t in tasks.list())
        assert tasks.tasks_for_engineer(engineer.id) == []
        assert len(store.get(TASKS)) == 2


class TestPresets:
    def test_catalog(self, roster):
        options = roster.presets()

        assert [o.preset.name for o in options] == ["Alex", "Sam", "Jordan", "Casey"]
        assert all(o.available for o in options)
        assert options[3].preset.specialty == Specialty.DEVOPS

    def test_availability_reflects_roster(self, roster):
        roster.create(engineer_data("Sam"))

        availability = {o.preset.name: o.available for o in roster.presets()}
        assert availability == {"Alex": True, "Sam": False, "Jordan": True, "Casey": True}

    def test_create_from_preset(self, roster, settings):
        engineer = roster.create_from_preset("preset-3")

        assert engineer.name == "Jordan"
        assert engineer.specialty == Specialty.FULLSTACK
        assert engineer.voice_id == settings.default_voice_id

    def test_create_from_preset_is_not_exclusive(self, roster):
        roster.create_from_preset("preset-1")
        roster.create_from_preset("preset-1")

        assert [e.name for e in roster.list()] == ["Alex", "Alex"]

    def test_create_from_unknown_preset(self, roster):
        with pytest.raises(NotFound, match="preset-9"):
            roster.create_from_preset("preset-9")

    def test_create_from_preset_respects_cap(self, roster):
        for name in ("A", "B", "C", "D"):
            roster.create(engineer_data(name))

        with pytest.raises(ValidationError, match="Maximum"):
            roster.create_from_preset("preset-1")

    def test_reset_preset_voices(self, roster, settings):
        alex = roster.create(engineer_data("Alex", voice_id="custom"))
        custom = roster.create(engineer_data("Morgan", voice_id="custom"))

        assert roster.reset_preset_voices() == 1
        assert roster.get(alex.id).voice_id == settings.default_voice_id
        assert roster.get(custom.id).voice_id == "custom"
        assert roster.reset_preset_voices() == 0
