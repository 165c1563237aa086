"""
Content pack models.

Packs are loaded once from JSON and never mutated. Entries either carry a
full static question or reference a template generator by `template_id`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from payprep.core.models import DOMAIN_NAMES


class TemplateEntry(BaseModel):
    """A static question or a template reference inside a pack."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str | None = None
    domain: int
    difficulty: str
    type: str
    template_id: str | None = None
    params: dict[str, Any] = Field(default_factory=dict)

    prompt: str | None = None
    choices: list[str] | None = None
    answer: Any = None
    tolerance: float | list[float] | None = None
    relative_tolerance: float | None = None
    unit_hint: str | None = None
    acceptable: list[list[str]] | None = None
    items: list[str] | None = None
    left: list[str] | None = None
    right: list[str] | None = None
    correct_order: list[int] | None = None
    explanation: str | None = None
    steps: list[str] | None = None

    tags: list[str] = Field(default_factory=list)
    fun_only: bool = False

    @field_validator("domain")
    @classmethod
    def _known_domain(cls, value: int) -> int:
        if value not in DOMAIN_NAMES:
            raise ValueError(f"Unknown domain {value}; expected one of {sorted(DOMAIN_NAMES)}")
        return value

    @property
    def is_template(self) -> bool:
        return bool(self.template_id)


class PackIndexEntry(BaseModel):
    """One row of packs.json."""

    id: str
    name: str
    description: str = ""
    file: str
    enabled: bool = True


class ContentPack(BaseModel):
    """A named collection of question entries."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    enabled: bool = True
    questions: list[TemplateEntry] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _assign_entry_ids(cls, data: Any) -> Any:
        """Give every entry a stable id (`<pack>-<position>`) when the file omits one."""
        if not isinstance(data, dict):
            return data
        pack_id = data.get("id", "pack")
        entries = []
        for position, entry in enumerate(data.get("questions") or [], start=1):
            fallback = f"{pack_id}-{position:03d}"
            if isinstance(entry, dict) and not entry.get("id"):
                entry = {**entry, "id": fallback}
            elif isinstance(entry, TemplateEntry) and not entry.id:
                entry = entry.model_copy(update={"id": fallback})
            entries.append(entry)
        return {**data, "questions": entries}


@dataclass(frozen=True)
class PoolEntry:
    """A selectable (pack, entry) pair."""

    pack_id: str
    entry: TemplateEntry
