from .connection import (
    DEFAULT_BASE_BRANCH,
    ConnectionCandidate,
    ConnectionDTO,
    ConnectionState,
    ConnectionStatus,
)
from .engineer import MAX_ENGINEERS, EngineerCreate, EngineerDTO, Specialty
from .task import TaskCreate, TaskDTO, TaskStatus

__all__ = [
    "DEFAULT_BASE_BRANCH",
    "MAX_ENGINEERS",
    "ConnectionCandidate",
    "ConnectionDTO",
    "ConnectionState",
    "ConnectionStatus",
    "EngineerCreate",
    "EngineerDTO",
    "Specialty",
    "TaskCreate",
    "TaskDTO",
    "TaskStatus",
]
