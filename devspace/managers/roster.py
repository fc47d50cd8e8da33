"""Engineer roster CRUD with the roster cap and cascading unassignment."""

from __future__ import annotations

from devspace.contracts.dto import MAX_ENGINEERS, EngineerCreate, EngineerDTO, TaskDTO
from devspace.contracts.validation import validate_input
from devspace.errors import NotFound, UnassignmentNotConfirmed, ValidationError
from devspace.logging import get_logger
from devspace.store import ENGINEERS, LocalStore

from .base import RecordManager
from .presets import EngineerPreset, PresetOption
from .tasks import TaskManager

logger = get_logger(__name__)


class RosterManager(RecordManager[EngineerDTO]):
    """Manages the ``engineers`` collection.

    Only the roster cap is enforced at this layer. Name uniqueness against
    presets is advisory and left to the picker.
    """

    collection = ENGINEERS
    model = EngineerDTO

    def __init__(
        self,
        store: LocalStore,
        tasks: TaskManager,
        presets: list[EngineerPreset] | None = None,
        **kwargs,
    ):
        super().__init__(store, **kwargs)
        self.tasks = tasks
        self._presets = presets or []

    def list(self) -> list[EngineerDTO]:
        """All engineers, oldest first."""
        return sorted(self._load_all(), key=lambda e: e.created_at)

    def get(self, engineer_id: str) -> EngineerDTO:
        engineer = self._find(engineer_id)
        if engineer is None:
            raise NotFound(f"Engineer not found: {engineer_id}")
        return engineer

    def create(self, data: EngineerCreate | dict) -> EngineerDTO:
        """Validate and persist a new engineer.

        Raises:
            ValidationError: roster is full or a field is invalid. Nothing is
                written in either case.
        """
        if len(self._load_all()) >= MAX_ENGINEERS:
            raise ValidationError(f"Maximum of {MAX_ENGINEERS} engineers allowed")

        validated = validate_input(EngineerCreate, data)
        engineer = EngineerDTO(
            id=self._id_factory(),
            created_at=self._clock(),
            **validated.model_dump(),
        )
        self._save(engineer)
        logger.info("engineer_created", engineer_id=engineer.id, name=engineer.name)
        return engineer

    def update(self, engineer_id: str, data: EngineerCreate | dict) -> EngineerDTO:
        """Replace every mutable field; ``id`` and ``created_at`` are kept."""
        validated = validate_input(EngineerCreate, data)
        updated = self.get(engineer_id).replace_fields(validated)
        self._save(updated)
        logger.info("engineer_updated", engineer_id=engineer_id)
        return updated

    def delete(self, engineer_id: str, confirm_unassign: bool = False) -> list[TaskDTO]:
        """Delete an engineer after unassigning its tasks.

        Tasks are unassigned first, then the engineer is removed. If the
        second write fails the tasks stay unassigned and the engineer stays
        in the roster, which leaves no dangling reference.

        Args:
            engineer_id: Engineer to delete
            confirm_unassign: Operator confirmed that assigned tasks may be
                unassigned. Required only when at least one task is affected.

        Returns:
            The tasks that were unassigned.

        Raises:
            NotFound: no engineer with that id
            UnassignmentNotConfirmed: tasks are assigned and confirmation is missing
        """
        self.get(engineer_id)

        assigned = self.tasks.tasks_for_engineer(engineer_id)
        if assigned and not confirm_unassign:
            raise UnassignmentNotConfirmed(engineer_id, len(assigned))

        unassigned = self.tasks.unassign_engineer(engineer_id) if assigned else []
        self.store.delete(self.collection, engineer_id)
        logger.info("engineer_deleted", engineer_id=engineer_id, unassigned_tasks=len(unassigned))
        return unassigned

    def presets(self) -> list[PresetOption]:
        """Preset catalog with availability against the current roster."""
        names = {e.name for e in self._load_all()}
        return [PresetOption(preset=p, available=p.name not in names) for p in self._presets]

    def create_from_preset(self, preset_id: str) -> EngineerDTO:
        """Create an engineer pre-filled from a preset. The roster cap still applies."""
        preset = next((p for p in self._presets if p.id == preset_id), None)
        if preset is None:
            raise NotFound(f"Preset not found: {preset_id}")
        return self.create(preset.to_create())

    def reset_preset_voices(self) -> int:
        """Reset ``voice_id`` of roster members named like a preset.

        Returns the number of engineers whose voice changed.
        """
        voices = {p.name: p.voice_id for p in self._presets}
        changed = 0
        for engineer in self._load_all():
            voice = voices.get(engineer.name)
            if voice is None or engineer.voice_id == voice:
                continue
            self._save(engineer.model_copy(update={"voice_id": voice}))
            logger.info("engineer_voice_reset", engineer_id=engineer.id, voice_id=voice)
            changed += 1
        return changed
