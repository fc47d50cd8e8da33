"""Catalog of preset engineers that pre-fill creation input."""

from pydantic import BaseModel

from devspace.config import Settings
from devspace.contracts.dto import EngineerCreate, Specialty

_DEFAULT_AVATARS = (
    "https://models.readyplayer.me/69226336672cca15c2b4bb34.glb",
    "https://models.readyplayer.me/692264ba672cca15c2b4d588.glb",
    "https://models.readyplayer.me/692264ba672cca15c2b4d588.glb",
    "https://models.readyplayer.me/692264fcbcfe438b189c885c.glb",
)

# (id, name, specialty, personality)
_CATALOG = (
    ("preset-1", "Alex", Specialty.FRONTEND, "Creative and detail-oriented frontend specialist"),
    ("preset-2", "Sam", Specialty.BACKEND, "Systematic and efficient backend engineer"),
    ("preset-3", "Jordan", Specialty.FULLSTACK, "Versatile full-stack developer"),
    ("preset-4", "Casey", Specialty.DEVOPS, "Infrastructure and deployment expert"),
)


class EngineerPreset(BaseModel):
    id: str
    name: str
    specialty: Specialty
    personality: str
    avatar_url: str
    voice_id: str

    def to_create(self) -> EngineerCreate:
        return EngineerCreate(
            name=self.name,
            personality=self.personality,
            avatar_url=self.avatar_url,
            voice_id=self.voice_id,
            specialty=self.specialty,
        )


class PresetOption(BaseModel):
    """A preset plus whether the roster already has an engineer by that name.

    ``available`` is guidance for the picker only; it is not enforced.
    """

    preset: EngineerPreset
    available: bool


def default_presets(settings: Settings) -> list[EngineerPreset]:
    """Build the catalog, applying avatar URL overrides from settings."""
    presets = []
    for index, (preset_id, name, specialty, personality) in enumerate(_CATALOG):
        avatar_url = (
            settings.preset_avatar_urls[index]
            if index < len(settings.preset_avatar_urls)
            else _DEFAULT_AVATARS[index]
        )
        presets.append(
            EngineerPreset(
                id=preset_id,
                name=name,
                specialty=specialty,
                personality=personality,
                avatar_url=avatar_url,
                voice_id=settings.default_voice_id,
            )
        )
    return presets
