"""Task CRUD and engineer-reference integrity."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from pydantic import ValidationError as PydanticValidationError

from devspace.contracts.dto import EngineerDTO, TaskCreate, TaskDTO, TaskStatus
from devspace.contracts.validation import validate_input
from devspace.errors import NotFound, StorageUnavailable
from devspace.logging import get_logger
from devspace.store import ENGINEERS, TASKS

from .base import RecordManager

logger = get_logger(__name__)

UNKNOWN_ENGINEER = "Unknown"
UNASSIGNED = "Unassigned"
STARTER_TASK_DESCRIPTION = "edit README"


class TaskManager(RecordManager[TaskDTO]):
    """Manages the ``tasks`` collection.

    Status is set by the operator and never changed here; moving a task
    through pending/running/completed belongs to the execution engine.
    """

    collection = TASKS
    model = TaskDTO

    def list(self) -> list[TaskDTO]:
        """All tasks, newest first."""
        return sorted(self._load_all(), key=lambda t: t.created_at, reverse=True)

    def get(self, task_id: str) -> TaskDTO:
        task = self._find(task_id)
        if task is None:
            raise NotFound(f"Task not found: {task_id}")
        return task

    def create(self, data: TaskCreate | dict) -> TaskDTO:
        """Create a task.

        A stale ``engineer_id`` is accepted; readers show it as "Unknown".
        """
        validated = validate_input(TaskCreate, data)

        if validated.engineer_id is not None:
            known = {r.get("id") for r in self.store.get(ENGINEERS)}
            if validated.engineer_id not in known:
                logger.warning("task_engineer_unknown", engineer_id=validated.engineer_id)

        task = TaskDTO(
            id=self._id_factory(),
            description=validated.description,
            engineer_id=validated.engineer_id,
            status=validated.status,
            output=None,
            created_at=self._clock(),
        )
        self._save(task)
        logger.info("task_created", task_id=task.id, engineer_id=task.engineer_id)
        return task

    def delete(self, task_id: str) -> None:
        """Remove a task whatever its status.

        Deleting a running task is a forced cancellation; no signal is sent
        to whatever is executing it.
        """
        task = self.get(task_id)
        self.store.delete(self.collection, task_id)
        logger.info("task_deleted", task_id=task_id, status=task.status.value)

    def tasks_for_engineer(self, engineer_id: str) -> list[TaskDTO]:
        return [t for t in self._load_all() if t.engineer_id == engineer_id]

    def unassign_engineer(self, engineer_id: str) -> list[TaskDTO]:
        """Set ``engineer_id`` to None on every task referencing the engineer.

        Unconditional once called; operator confirmation happens in the
        caller. Returns the rewritten tasks.
        """
        unassigned = []
        for task in self.tasks_for_engineer(engineer_id):
            updated = task.model_copy(update={"engineer_id": None})
            self._save(updated)
            unassigned.append(updated)
        if unassigned:
            logger.info("tasks_unassigned", engineer_id=engineer_id, count=len(unassigned))
        return unassigned

    def count_by_status(self) -> dict[TaskStatus, int]:
        counts = Counter(t.status for t in self._load_all())
        return {status: counts.get(status, 0) for status in TaskStatus}

    def reset_to_starter_task(self) -> TaskDTO:
        """Replace every task with a single pending "edit README" task.

        The task goes to the first engineer by creation time, if any.
        """
        try:
            engineers = [EngineerDTO.model_validate(r) for r in self.store.get(ENGINEERS)]
        except PydanticValidationError as e:
            raise StorageUnavailable("Stored engineers contain an invalid record") from e
        first = min(engineers, key=lambda e: e.created_at, default=None)

        for task in self._load_all():
            self.store.delete(self.collection, task.id)

        engineer_id = first.id if first else None
        return self.create(TaskCreate(description=STARTER_TASK_DESCRIPTION, engineer_id=engineer_id))

    @staticmethod
    def resolve_engineer_name(task: TaskDTO, engineers: Iterable[EngineerDTO]) -> str:
        """Display name of the task's engineer.

        An id that no longer resolves is shown as "Unknown" instead of failing.
        """
        if task.engineer_id is None:
            return UNASSIGNED
        for engineer in engineers:
            if engineer.id == task.engineer_id:
                return engineer.name
        return UNKNOWN_ENGINEER
