import json
import logging
from datetime import datetime, timedelta, timezone

import pytest

from revisor.application.scheduler import complete_revision, create_item
from revisor.domain.models import Archived
from revisor.domain.ports import StorageError
from revisor.infrastructure.storage import JsonFileStore

NOW = datetime(2025, 3, 3, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "revisions.json"


@pytest.fixture
def sample_items():
    active = create_item("Active", [1, 3], NOW, item_id="01A")
    archived = create_item("Archived", [2], NOW, item_id="01B").evolve(
        status=Archived(at=NOW + timedelta(hours=1))
    )
    mastered = complete_revision(create_item("Mastered", [1], NOW, item_id="01C"), NOW)
    return [active, archived, mastered]


def test_missing_file_loads_empty(data_file):
    assert JsonFileStore(data_file).load() == []


def test_save_then_load_preserves_items_and_order(data_file, sample_items):
    store = JsonFileStore(data_file)
    store.save(sample_items)

    assert JsonFileStore(data_file).load() == sample_items


def test_saved_document_shape(data_file, sample_items):
    JsonFileStore(data_file).save(sample_items)

    document = json.loads(data_file.read_text())
    active, archived, mastered = document["revisionItems"]

    assert active == {
        "id": "01A",
        "title": "Active",
        "level": 0,
        "lastRevisionDate": "2025-03-03T12:00:00.000Z",
        "nextRevisionDate": "2025-03-04T12:00:00.000Z",
        "createdAt": "2025-03-03T12:00:00.000Z",
        "revisionIntervals": [1, 3],
    }
    assert archived["archivedAt"] == "2025-03-03T13:00:00.000Z"
    assert "completedAt" not in archived
    assert mastered["completedAt"] == "2025-03-03T12:00:00.000Z"
    assert mastered["level"] == 1


def test_save_keeps_other_slots(data_file):
    data_file.parent.mkdir(parents=True)
    data_file.write_text(json.dumps({"theme": "dark"}))

    JsonFileStore(data_file).save([create_item("X", [1], NOW)])

    document = json.loads(data_file.read_text())
    assert document["theme"] == "dark"
    assert len(document["revisionItems"]) == 1


def test_custom_key(data_file):
    JsonFileStore(data_file, key="other").save([create_item("X", [1], NOW)])
    assert JsonFileStore(data_file).load() == []
    assert len(JsonFileStore(data_file, key="other").load()) == 1


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", '{"revisionItems": "nope"}', ""])
def test_unparsable_data_loads_empty(data_file, content, caplog):
    data_file.parent.mkdir(parents=True)
    data_file.write_text(content)

    with caplog.at_level(logging.WARNING):
        assert JsonFileStore(data_file).load() == []


def test_invalid_records_are_skipped(data_file, caplog):
    data_file.parent.mkdir(parents=True)
    good = {
        "id": "ok",
        "title": "Good",
        "level": 0,
        "lastRevisionDate": "2025-03-03T12:00:00.000Z",
        "nextRevisionDate": "2025-03-04T12:00:00.000Z",
        "createdAt": "2025-03-03T12:00:00.000Z",
    }
    bad = dict(good, id="bad", level=-1)
    data_file.write_text(json.dumps({"revisionItems": [bad, good]}))

    with caplog.at_level(logging.WARNING):
        items = JsonFileStore(data_file).load()

    assert [i.id for i in items] == ["ok"]
    assert items[0].revision_intervals is None
    assert "Skipping unreadable item #0" in caplog.text


def test_legacy_record_with_both_timestamps_loads_as_archived(data_file):
    data_file.parent.mkdir(parents=True)
    record = {
        "id": "x",
        "title": "Both",
        "level": 5,
        "lastRevisionDate": "2025-03-03T12:00:00Z",
        "nextRevisionDate": "2025-03-03T12:00:00Z",
        "createdAt": "2025-01-01T12:00:00Z",
        "revisionIntervals": [1, 3, 7, 14, 30],
        "archivedAt": "2025-03-04T12:00:00Z",
        "completedAt": "2025-03-03T12:00:00Z",
    }
    data_file.write_text(json.dumps({"revisionItems": [record]}))

    (item,) = JsonFileStore(data_file).load()

    assert item.is_archived
    assert item.archived_at == datetime(2025, 3, 4, 12, 0, tzinfo=timezone.utc)


def test_write_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    store = JsonFileStore(blocker / "revisions.json")

    with pytest.raises(StorageError):
        store.save([create_item("X", [1], NOW)])


def test_no_temp_files_left_behind(data_file, sample_items):
    JsonFileStore(data_file).save(sample_items)
    assert [p.name for p in data_file.parent.iterdir()] == ["revisions.json"]
