"""Error taxonomy for the DevSpace core.

Every failure that crosses a component boundary is one of these classes.
The GitHub client translates transport errors into this taxonomy, so
callers never see raw ``httpx`` exceptions.
"""


class DevSpaceError(Exception):
    """Base class for all core errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DevSpaceError):
    """Input failed a shape or constraint check. Never retried."""


class NotFound(DevSpaceError):
    """A referenced local or remote entity does not exist."""


class Forbidden(DevSpaceError):
    """The credential lacks access to the remote resource."""


class RemoteError(DevSpaceError):
    """Transport or provider failure other than 404/403."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class StorageUnavailable(DevSpaceError):
    """The backing medium of the local store cannot be read or written."""


class NotVerified(DevSpaceError):
    """A binding was saved without a successful verification."""


class UnassignmentNotConfirmed(DevSpaceError):
    """Deleting an engineer would unassign tasks and the operator has not confirmed."""

    def __init__(self, engineer_id: str, task_count: int):
        super().__init__(
            f"This engineer has {task_count} task(s) assigned. "
            "Tasks will be unassigned (engineer_id set to null). Confirm to continue."
        )
        self.engineer_id = engineer_id
        self.task_count = task_count


__all__ = [
    "DevSpaceError",
    "Forbidden",
    "NotFound",
    "NotVerified",
    "RemoteError",
    "StorageUnavailable",
    "UnassignmentNotConfirmed",
    "ValidationError",
]
