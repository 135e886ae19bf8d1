"""Catalog Store: mutations persist, failures never roll back, imports are atomic.

Invariants:
    - Each mutation writes the whole document
    - persist() then load() yields an equal catalog
    - A failed write keeps the mutation in memory and notifies the user
    - A corrupt document or import leaves memory exactly as it was
"""

import json

import pytest

from fengshui_catalog.core.domain_types import Category
from fengshui_catalog.core.errors import (
    DecodeError, FileReadError, ImportParseError, WriteError,
)
from fengshui_catalog.core.records import GateRecord, StarRecord
from fengshui_catalog.infrastructure.json_storage import JsonFileStorage
from fengshui_catalog.services.catalog_store import CatalogStore

from tests.services.fake_storage import FailingStorage


def _persisted(data_file) -> dict:
    return json.loads(data_file.read_text(encoding="utf-8"))


# -- Mutations + persistence ---------------------------------------------------

def test_save_appends_and_persists(store, data_file):
    result = store.save(Category.STARS, StarRecord(id="s1", name="Thiên Bồng"))
    assert result.changed and result.persisted
    assert store.records(Category.STARS) == [result.record]
    assert _persisted(data_file)["CửuTinh"][0]["name"] == "Thiên Bồng"


def test_save_from_mapping(store):
    result = store.save(Category.GATES, {"name": "Khai Môn"})
    assert isinstance(result.record, GateRecord)
    assert result.record.id


def test_edit_merges_and_persists(store, data_file):
    store.save(Category.STARS, StarRecord(id="s1", name="Thiên Bồng"))
    result = store.edit(Category.STARS, "s1", {"yinYang": "Âm"})
    assert result.changed
    assert result.record.name == "Thiên Bồng"
    assert _persisted(data_file)["CửuTinh"][0]["yinYang"] == "Âm"


def test_edit_unknown_id_is_silent(store, notifications):
    store.save(Category.STARS, StarRecord(id="s1"))
    before = store.records(Category.STARS)
    result = store.edit(Category.STARS, "nope", {"name": "x"})
    assert result.changed is False
    assert result.record is None
    assert store.records(Category.STARS) == before
    assert notifications == []


def test_delete_twice(store, data_file):
    store.save(Category.GATES, GateRecord(id="g1"))
    assert store.delete(Category.GATES, "g1").changed is True
    assert store.delete(Category.GATES, "g1").changed is False
    assert _persisted(data_file)["BátMôn"] == []


def test_persist_then_load_roundtrip(store, data_file):
    store.save(Category.STARS, StarRecord(id="s1", name="Thiên Tâm", element="Kim"))
    store.save(Category.FORMATIONS, {"id": "f1", "auspiciousness": "Cát", "note": "x"})
    store.persist()

    fresh = CatalogStore(JsonFileStorage(data_file))
    fresh.load()
    assert fresh.state == store.state


def test_load_without_document_keeps_empty_catalog(store):
    state = store.load()
    assert len(state) == 0


def test_load_replaces_state_in_place(store, data_file):
    held = store.state
    data_file.parent.mkdir(parents=True)
    data_file.write_text('{"BátThần": [{"id": "t1"}]}', encoding="utf-8")
    store.load()
    assert held is store.state
    assert store.get(Category.SPIRITS, "t1") is not None


# -- Failure handling ----------------------------------------------------------

def test_write_failure_keeps_mutation(failing_store, notifications):
    result = failing_store.save(Category.STARS, StarRecord(id="s1"))
    assert result.persisted is False
    assert isinstance(result.write_error, WriteError)
    assert failing_store.get(Category.STARS, "s1") is not None
    assert [type(n) for n in notifications] == [WriteError]


def test_every_mutation_attempts_a_write(notifications):
    storage = FailingStorage()
    store = CatalogStore(storage, notify=notifications.append)
    store.save(Category.STARS, StarRecord(id="s1"))
    store.edit(Category.STARS, "s1", {"name": "a"})
    store.delete(Category.STARS, "s1")
    assert storage.write_attempts == 3
    assert len(notifications) == 3


def test_persist_raises_write_error(failing_store):
    with pytest.raises(WriteError):
        failing_store.persist()


def test_corrupt_document_leaves_state_untouched(notifications):
    store = CatalogStore(FailingStorage(text="{corrupt"), notify=notifications.append)
    store.state.create(Category.STARS, StarRecord(id="keep"))

    with pytest.raises(DecodeError):
        store.load()

    assert [r.id for r in store.records(Category.STARS)] == ["keep"]
    assert [n.code for n in notifications] == ["DECODE_ERROR"]


def test_wrongly_shaped_document_is_decode_error():
    store = CatalogStore(FailingStorage(text='{"CửuTinh": "x"}'))
    with pytest.raises(DecodeError):
        store.load()


def test_deeply_nested_document_is_decode_error(notifications):
    store = CatalogStore(FailingStorage(text="[" * 100_000), notify=notifications.append)
    with pytest.raises(DecodeError):
        store.load()
    assert len(store.state) == 0
    assert [n.code for n in notifications] == ["DECODE_ERROR"]


def test_unreadable_document_is_reported(tmp_path, notifications):
    store = CatalogStore(JsonFileStorage(tmp_path), notify=notifications.append)
    with pytest.raises(FileReadError):
        store.load()
    assert [n.code for n in notifications] == ["FILE_READ_ERROR"]


# -- Import --------------------------------------------------------------------

def test_import_replaces_catalog_and_persists(store, data_file):
    store.save(Category.GATES, GateRecord(id="old"))
    result = store.import_text(
        '{"CửuTinh":[{"id":"1","yinYang":"Yin"}],'
        '"CáchCục":[{"id":"2","auspiciousness":"Auspicious"}]}',
    )
    assert result.counts == {"CửuTinh": 1, "BátMôn": 0, "BátThần": 0, "CáchCục": 1}
    assert result.message == "Dữ liệu đã được nhập thành công!"
    assert store.get(Category.GATES, "old") is None
    persisted = _persisted(data_file)
    assert persisted["CửuTinh"][0]["yinYang"] == "Âm"
    assert persisted["CáchCục"][0]["auspiciousness"] == "Cát"


def test_malformed_import_leaves_store_intact(store, notifications):
    store.save(Category.GATES, GateRecord(id="g1", name="Cảnh Môn"))
    before = store.export_document()

    with pytest.raises(ImportParseError):
        store.import_text("{not json")

    assert store.export_document() == before
    assert [n.code for n in notifications] == ["IMPORT_PARSE_ERROR"]


def test_import_with_bad_category_changes_nothing(store):
    store.save(Category.GATES, GateRecord(id="g1"))
    with pytest.raises(ImportParseError):
        store.import_text('{"CửuTinh":[{"id":"1"}],"BátMôn":"broken"}')
    assert store.get(Category.GATES, "g1") is not None
    assert store.records(Category.STARS) == []


def test_deeply_nested_import_leaves_store_intact(store, notifications):
    store.save(Category.GATES, GateRecord(id="g1"))
    with pytest.raises(ImportParseError):
        store.import_text("[" * 100_000)
    assert store.get(Category.GATES, "g1") is not None
    assert [n.code for n in notifications] == ["IMPORT_PARSE_ERROR"]


def test_import_write_failure_keeps_import(failing_store):
    result = failing_store.import_text('{"BátThần":[{"id":"t"}]}')
    assert result.persisted is False
    assert failing_store.get(Category.SPIRITS, "t") is not None


def test_import_file(store, tmp_path):
    path = tmp_path / "legacy.JSON"
    path.write_text('{"CửuTinh":[{"id":"1","yinYang":"Yang"}]}', encoding="utf-8")
    store.import_file(path)
    assert store.get(Category.STARS, "1").yin_yang == "Dương"


def test_import_file_rejects_non_json_name(store, tmp_path, notifications):
    path = tmp_path / "legacy.txt"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(ImportParseError):
        store.import_file(path)
    assert len(notifications) == 1


def test_import_missing_file_is_file_read_error(store, tmp_path):
    with pytest.raises(FileReadError):
        store.import_file(tmp_path / "missing.json")


def test_import_upload_strips_bom(store):
    content = "\ufeff{\"BátMôn\":[{\"id\":\"g\"}]}".encode("utf-8")
    store.import_upload("data.json", content)
    assert store.get(Category.GATES, "g").element_type == "NgũHành"


def test_import_upload_non_utf8_fails_at_parse(store, notifications):
    with pytest.raises(ImportParseError):
        store.import_upload("data.json", b"\xff\xfe\xfa")
    assert [n.code for n in notifications] == ["IMPORT_PARSE_ERROR"]


def test_import_upload_non_utf8_inside_string_is_replaced(store):
    content = b'{"B\xc3\xa1tM\xc3\xb4n":[{"id":"g","name":"a\xffb"}]}'
    store.import_upload("data.json", content)
    assert store.get(Category.GATES, "g").name == "a\ufffdb"


# -- Lookup / export -----------------------------------------------------------

def test_search_delegates(store):
    store.save(Category.STARS, StarRecord(id="1", name="Thiên Phụ"))
    assert [r.id for _, r in store.search("phụ")] == ["1"]


def test_export_document_is_current_schema(store):
    store.save(Category.SPIRITS, {"id": "t1", "name": "Cửu Thiên"})
    exported = json.loads(store.export_document())
    assert list(exported) == ["CửuTinh", "BátMôn", "BátThần", "CáchCục"]
    assert exported["BátThần"][0]["elementType"] == "NgũHành"
