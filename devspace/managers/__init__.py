from .connection import ConnectionManager
from .presets import EngineerPreset, PresetOption, default_presets
from .roster import RosterManager
from .tasks import TaskManager

__all__ = [
    "ConnectionManager",
    "EngineerPreset",
    "PresetOption",
    "RosterManager",
    "TaskManager",
    "default_presets",
]
