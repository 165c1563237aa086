"""
Unit tests for content packs and the pool.
"""

import json

import pytest
from pydantic import ValidationError

from payprep.content.loader import ContentLibrary, build_pool
from payprep.content.models import ContentPack
from payprep.core.exceptions import ContentError


def write_pack_dir(root, packs, index=None):
    index = index if index is not None else [
        {"id": pack["id"], "name": pack["name"], "file": f"{pack['id']}.json"} for pack in packs
    ]
    (root / "packs.json").write_text(json.dumps(index), encoding="utf-8")
    for pack in packs:
        (root / f"{pack['id']}.json").write_text(json.dumps(pack), encoding="utf-8")


class TestContentPack:
    """Pack validation."""

    def test_missing_entry_ids_assigned(self, template_pack):
        assert [e.id for e in template_pack.questions] == ["mini-001", "mini-002"]

    def test_unknown_domain_rejected(self):
        with pytest.raises(ValidationError):
            ContentPack.model_validate(
                {"id": "x", "name": "X", "questions": [{"domain": 9, "difficulty": "easy", "type": "mcq"}]}
            )

    def test_is_template(self, template_pack):
        assert template_pack.questions[0].is_template
        assert not template_pack.questions[1].is_template


class TestBuildPool:
    """Fun-only filtering."""

    def test_fun_only_dropped(self, template_pack):
        pool = build_pool([template_pack])
        assert [p.entry.id for p in pool] == ["mini-001"]

    def test_fun_mode_keeps_everything(self, template_pack):
        pool = build_pool([template_pack], fun_mode=True)
        assert [p.pack_id for p in pool] == ["mini", "mini"]


class TestContentLibrary:
    """Loading from disk."""

    def test_load(self, tmp_path):
        write_pack_dir(
            tmp_path,
            [
                {"id": "a", "name": "A", "questions": [{"domain": 1, "difficulty": "easy", "type": "mcq", "prompt": "?"}]},
                {"id": "b", "name": "B", "questions": []},
            ],
        )
        library = ContentLibrary.load(tmp_path)

        assert set(library.packs) == {"a", "b"}
        assert [p.id for p in library.enabled_packs(["b", "a", "zzz"])] == ["a", "b"]
        assert len(library.build_pool(["a"])) == 1

    def test_bad_pack_skipped(self, tmp_path):
        write_pack_dir(tmp_path, [{"id": "good", "name": "Good", "questions": []}])
        index = json.loads((tmp_path / "packs.json").read_text(encoding="utf-8"))
        index.append({"id": "bad", "name": "Bad", "file": "bad.json"})
        (tmp_path / "packs.json").write_text(json.dumps(index), encoding="utf-8")
        (tmp_path / "bad.json").write_text("{oops", encoding="utf-8")

        library = ContentLibrary.load(tmp_path)
        assert set(library.packs) == {"good"}
        assert [row.id for row in library.index] == ["good", "bad"]

    def test_non_object_pack_skipped(self, tmp_path):
        write_pack_dir(tmp_path, [{"id": "good", "name": "Good", "questions": []}])
        index = json.loads((tmp_path / "packs.json").read_text(encoding="utf-8"))
        index.append({"id": "listy", "name": "Listy", "file": "listy.json"})
        (tmp_path / "packs.json").write_text(json.dumps(index), encoding="utf-8")
        (tmp_path / "listy.json").write_text(json.dumps([{"prompt": "?"}]), encoding="utf-8")

        library = ContentLibrary.load(tmp_path)
        assert set(library.packs) == {"good"}

    def test_missing_index(self, tmp_path):
        with pytest.raises(ContentError):
            ContentLibrary.load(tmp_path)

    def test_bundled_packs(self, bundled_library):
        assert set(bundled_library.packs) == {"core", "fun"}
        core = bundled_library.packs["core"]
        assert {e.type for e in core.questions} == {
            "mcq", "msq", "numeric", "fill", "order", "match", "multi_numeric"
        }
        assert all(e.fun_only for e in bundled_library.packs["fun"].questions)
