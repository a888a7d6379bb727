"""Tests for the JSON document store: reads, backed-up writes and merges."""

import json
import logging
from datetime import datetime, timezone

import pytest
import time_machine

from helpcentre.cache import ReadCache
from helpcentre.documents import BACKUP_SINGLE, DocumentStore
from helpcentre.errors import NotFound, ParseError

FROZEN = datetime(2024, 1, 1, tzinfo=timezone.utc)
FROZEN_MILLIS = 1704067200000


@pytest.fixture
def documents(content_root):
    return DocumentStore(content_root)


class TestRead:
    def test_missing_document_is_not_found(self, documents, content_root):
        with pytest.raises(NotFound):
            documents.read(content_root / "nope.json")

    def test_invalid_json_is_a_parse_error(self, documents, content_root):
        path = content_root / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ParseError):
            documents.read(path)

    def test_directory_is_not_found(self, documents, content_root):
        with pytest.raises(NotFound):
            documents.read(content_root)


class TestWrite:
    def test_first_write_has_no_backup(self, documents, content_root):
        path = content_root / "config.json"
        assert documents.write(path, {"id": "x"}) is None
        assert json.loads(path.read_text(encoding="utf-8")) == {"id": "x"}

    def test_creates_parent_directories(self, documents, content_root):
        path = content_root / "groups" / "uki" / "config.json"
        documents.write(path, {})
        assert path.is_file()

    def test_backup_holds_previous_content(self, documents, content_root):
        path = content_root / "config.json"
        documents.write(path, {"version": 1})
        backup = documents.write(path, {"version": 2})
        assert backup is not None
        assert json.loads(backup.read_text(encoding="utf-8")) == {"version": 1}
        assert documents.read(path) == {"version": 2}

    def test_backup_name_uses_milliseconds(self, documents, content_root):
        path = content_root / "config.json"
        documents.write(path, {"version": 1})
        with time_machine.travel(FROZEN, tick=False):
            backup = documents.write(path, {"version": 2})
        assert backup.name == f"config.json.backup-{FROZEN_MILLIS}"

    def test_backups_in_the_same_millisecond_do_not_collide(self, documents, content_root):
        path = content_root / "config.json"
        documents.write(path, {"version": 1})
        with time_machine.travel(FROZEN, tick=False):
            first = documents.write(path, {"version": 2})
            second = documents.write(path, {"version": 3})
        assert first.name == f"config.json.backup-{FROZEN_MILLIS}"
        assert second.name == f"config.json.backup-{FROZEN_MILLIS + 1}"
        assert json.loads(first.read_text(encoding="utf-8")) == {"version": 1}
        assert json.loads(second.read_text(encoding="utf-8")) == {"version": 2}

    def test_single_backup_style_overwrites_one_file(self, documents, content_root):
        path = content_root / "incidents.json"
        documents.write(path, {"banners": []})
        documents.write(path, {"banners": [1]}, backup=BACKUP_SINGLE)
        backup = documents.write(path, {"banners": [2]}, backup=BACKUP_SINGLE)
        assert backup.name == "incidents.json.backup"
        assert json.loads(backup.read_text(encoding="utf-8")) == {"banners": [1]}

    def test_output_is_indented_utf8(self, documents, content_root):
        path = content_root / "contact.json"
        documents.write(path, {"currencySymbol": "£"})
        assert path.read_text(encoding="utf-8") == '{\n  "currencySymbol": "£"\n}\n'

    def test_backup_failure_is_logged_not_raised(self, documents, content_root, monkeypatch, caplog):
        path = content_root / "config.json"
        documents.write(path, {"version": 1})

        def fail(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr("helpcentre.documents.copy2", fail)
        with caplog.at_level(logging.WARNING, logger="helpcentre"):
            assert documents.write(path, {"version": 2}) is None
        assert documents.read(path) == {"version": 2}
        assert "Could not create backup of config.json" in caplog.text

    def test_write_invalidates_cache(self, content_root):
        cache = ReadCache()
        documents = DocumentStore(content_root, cache=cache)
        cache.get_or_load("key", lambda: 1)
        documents.write(content_root / "a.json", [])
        assert "key" not in cache


class TestCreateIfAbsent:
    def test_leaves_existing_document_alone(self, documents, content_root):
        path = content_root / "articles.json"
        documents.write(path, [{"id": "keep"}])
        assert documents.create_if_absent(path, []) is False
        assert documents.read(path) == [{"id": "keep"}]

    def test_creates_missing_document(self, documents, content_root):
        path = content_root / "articles.json"
        assert documents.create_if_absent(path, []) is True
        assert documents.read(path) == []


class TestMerge:
    def test_shallow_merge_replaces_lists(self, documents, content_root):
        path = content_root / "config.json"
        documents.write(path, {"id": "p", "personas": ["customer", "accountant"], "icon": "x"})
        merged = documents.merge(path, {"personas": ["customer"]})
        assert merged == {"id": "p", "personas": ["customer"], "icon": "x"}
        assert documents.read(path) == merged

    def test_nested_objects_are_replaced_not_merged(self, documents, content_root):
        path = content_root / "config.json"
        documents.write(path, {"navigation": {"main": [1], "footer": [2]}})
        merged = documents.merge(path, {"navigation": {"main": []}})
        assert merged["navigation"] == {"main": []}

    def test_merge_into_missing_document(self, documents, content_root):
        with pytest.raises(NotFound):
            documents.merge(content_root / "config.json", {"a": 1})


class TestDirectories:
    def test_list_dirs_is_sorted_and_skips_files(self, documents, content_root):
        (content_root / "b").mkdir()
        (content_root / "a").mkdir()
        (content_root / "file.json").write_text("{}", encoding="utf-8")
        assert documents.list_dirs(content_root) == ["a", "b"]

    def test_list_dirs_of_missing_directory(self, documents, content_root):
        assert documents.list_dirs(content_root / "missing") == []

    def test_remove_tree_is_idempotent(self, documents, content_root):
        target = content_root / "products" / "old"
        documents.write(target / "config.json", {})
        assert documents.remove_tree(target) is True
        assert not target.exists()
        assert documents.remove_tree(target) is False
