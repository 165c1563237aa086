"""
Content Loader: pack index and pack files.

Reads `packs.json` from a content directory and each pack file it lists.
A pack that fails to parse is skipped with an error log so one bad file
does not take the whole catalogue down; a missing or unreadable index is
a ContentError.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from payprep.core.exceptions import ContentError

from .models import ContentPack, PackIndexEntry, PoolEntry

INDEX_FILENAME = "packs.json"


class ContentLibrary:
    """
    All content packs available to the engine.

    Attributes:
        index: Rows of packs.json in file order
        packs: Loaded packs keyed by id
    """

    def __init__(self, index: list[PackIndexEntry], packs: dict[str, ContentPack]):
        self.index = index
        self.packs = packs

    @classmethod
    def load(cls, content_dir: Path) -> ContentLibrary:
        """
        Load the pack index and every pack it references.

        Args:
            content_dir: Directory containing packs.json

        Raises:
            ContentError: If packs.json is missing or malformed
        """
        index_path = Path(content_dir) / INDEX_FILENAME
        try:
            with open(index_path, encoding="utf-8") as f:
                raw_index = json.load(f)
            index = [PackIndexEntry.model_validate(row) for row in raw_index]
        except (OSError, json.JSONDecodeError, ValidationError, TypeError) as e:
            raise ContentError(f"Cannot read pack index {index_path}: {e}") from e

        packs: dict[str, ContentPack] = {}
        for row in index:
            pack_path = Path(content_dir) / row.file
            try:
                with open(pack_path, encoding="utf-8") as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise TypeError(f"pack file must hold an object, got {type(data).__name__}")
                data.setdefault("id", row.id)
                data.setdefault("name", row.name)
                data.setdefault("description", row.description)
                data.setdefault("enabled", row.enabled)
                pack = ContentPack.model_validate(data)
            except (OSError, json.JSONDecodeError, ValidationError, TypeError) as e:
                logger.error(f"Skipping pack {row.id!r} ({pack_path}): {e}")
                continue
            packs[pack.id] = pack
            logger.debug(f"Loaded pack {pack.id!r} with {len(pack.questions)} entries")

        logger.info(f"Loaded {len(packs)}/{len(index)} content packs from {content_dir}")
        return cls(index, packs)

    @classmethod
    def from_packs(cls, packs: Iterable[ContentPack]) -> ContentLibrary:
        """Build a library directly from pack objects."""
        pack_list = list(packs)
        index = [
            PackIndexEntry(id=p.id, name=p.name, description=p.description, file=f"{p.id}.json", enabled=p.enabled)
            for p in pack_list
        ]
        return cls(index, {p.id: p for p in pack_list})

    def enabled_packs(self, enabled_ids: Iterable[str]) -> list[ContentPack]:
        """Packs whose id is in enabled_ids, in index order."""
        wanted = set(enabled_ids)
        return [self.packs[row.id] for row in self.index if row.id in wanted and row.id in self.packs]

    def build_pool(self, enabled_ids: Iterable[str], fun_mode: bool = False) -> list[PoolEntry]:
        """Flatten enabled packs into the candidate pool for one attempt."""
        return build_pool(self.enabled_packs(enabled_ids), fun_mode=fun_mode)


def build_pool(packs: Iterable[ContentPack], fun_mode: bool = False) -> list[PoolEntry]:
    """
    Flatten packs into (pack_id, entry) candidates.

    Entries flagged fun_only are dropped unless fun mode is on.
    """
    pool: list[PoolEntry] = []
    for pack in packs:
        for entry in pack.questions:
            if entry.fun_only and not fun_mode:
                continue
            pool.append(PoolEntry(pack_id=pack.id, entry=entry))
    return pool
