from datetime import timedelta

import pytest

from revisor.application.scheduler import create_item
from revisor.application.service import AmbiguousItemIdError, RevisionService
from revisor.domain.models import Archived
from revisor.infrastructure.storage import MemoryStore


# --- add ---


def test_add_appends_and_persists(service, store, t0):
    first = service.add("Topic A", [1, 3, 7, 14, 30])
    second = service.add("Topic B")

    assert [i.title for i in service.items] == ["Topic A", "Topic B"]
    assert first.next_revision_date == t0 + timedelta(days=1)
    assert second.revision_intervals == (1, 3, 7, 14, 30)
    assert store.load() == service.items
    assert store.save_count == 2


@pytest.mark.parametrize("title, intervals", [("  ", [1, 2]), ("X", []), ("X", [3, 0])])
def test_add_rejects_invalid_input_without_writing(service, store, title, intervals):
    assert service.add(title, intervals) is None
    assert service.items == []
    assert store.save_count == 0


def test_add_uses_configured_default_schedule(store, clock, t0):
    service = RevisionService(store, clock=clock, default_intervals=[2, 5])
    item = service.add("X")
    assert item.revision_intervals == (2, 5)
    assert item.next_revision_date == t0 + timedelta(days=2)


# --- complete ---


def test_complete_scenario_reaches_mastery(service, clock):
    item = service.add("Topic A", [1, 3, 7, 14, 30])

    t1 = clock.advance(days=1, hours=3)
    reviewed = service.complete(item.id)
    assert reviewed.level == 1
    assert reviewed.next_revision_date == t1 + timedelta(days=3)

    for _ in range(4):
        clock.advance(days=2)
        reviewed = service.complete(item.id)

    assert reviewed.level == 5
    assert reviewed.completed_at == clock()
    assert service.get(item.id) == reviewed


def test_complete_is_a_no_op_once_mastered(service, store, clock):
    item = service.add("X", [1])
    mastered = service.complete(item.id)
    saves = store.save_count

    clock.advance(days=3)
    assert service.complete(item.id) is None

    assert service.get(item.id) == mastered
    assert store.save_count == saves


def test_complete_ignores_archived_items(service):
    item = service.add("X", [1, 2])
    archived = service.archive(item.id)

    assert service.complete(item.id) is None
    assert service.get(item.id) == archived


def test_complete_only_touches_target(service):
    a = service.add("A")
    b = service.add("B")

    service.complete(b.id)

    assert service.get(a.id) == a
    assert [i.id for i in service.items] == [a.id, b.id]


def test_unknown_id_is_a_no_op(service, store):
    service.add("A")
    saves = store.save_count

    assert service.complete("missing") is None
    assert service.archive("missing") is None
    assert service.restore("missing") is None
    assert service.update_title("missing", "New") is None
    assert service.delete_permanently("missing") is None
    assert store.save_count == saves


# --- archive / restore ---


def test_archive_then_restore_is_identity(service, clock):
    item = service.add("X", [1, 3])
    clock.advance(days=1)
    before = service.complete(item.id)

    clock.advance(days=2)
    archived = service.archive(item.id)
    assert archived.status == Archived(at=clock())
    assert archived.level == before.level
    assert archived.next_revision_date == before.next_revision_date

    clock.advance(days=1)
    restored = service.restore(item.id)

    assert restored == before


def test_archive_does_not_apply_to_mastered_items(service):
    item = service.add("X", [1])
    mastered = service.complete(item.id)

    assert service.archive(item.id) is None
    assert service.get(item.id) == mastered


def test_restore_ignores_non_archived_items(service):
    item = service.add("X")
    assert service.restore(item.id) is None


# --- delete / clear ---


def test_delete_permanently_removes_any_state(service):
    active = service.add("Active")
    archived = service.add("Archived")
    service.archive(archived.id)
    mastered = service.add("Mastered", [1])
    service.complete(mastered.id)

    for item in (active, archived, mastered):
        assert service.delete_permanently(item.id).id == item.id

    assert service.items == []


def test_clear_completed_keeps_others_in_order(service):
    a = service.add("A")
    m1 = service.add("M1", [1])
    b = service.add("B")
    m2 = service.add("M2", [1])
    c = service.add("C")
    service.complete(m1.id)
    service.complete(m2.id)
    service.archive(b.id)

    assert service.clear_completed() == 2
    assert [i.id for i in service.items] == [a.id, b.id, c.id]
    assert service.get(b.id).is_archived


def test_clear_completed_without_mastered_items_does_not_write(service, store):
    service.add("A")
    saves = store.save_count
    assert service.clear_completed() == 0
    assert store.save_count == saves


# --- update_title ---


def test_update_title_trims(service):
    item = service.add("Old")
    assert service.update_title(item.id, "  New  ").title == "New"
    assert service.get(item.id).title == "New"


def test_update_title_rejects_blank(service):
    item = service.add("Old")
    assert service.update_title(item.id, "   ") is None
    assert service.get(item.id).title == "Old"


def test_update_title_applies_to_archived_items(service):
    item = service.add("Old")
    service.archive(item.id)
    renamed = service.update_title(item.id, "New")
    assert renamed.title == "New"
    assert renamed.is_archived


# --- retention sweep on load ---


def test_refresh_purges_expired_archives_and_saves(clock, t0):
    keep = create_item("Keep", [1], t0)
    expired = create_item("Old", [1], t0).evolve(status=Archived(at=t0 - timedelta(days=8)))
    recent = create_item("Recent", [1], t0).evolve(status=Archived(at=t0 - timedelta(days=6)))
    store = MemoryStore([keep, expired, recent])

    service = RevisionService(store, clock=clock)

    assert service.items == [keep, recent]
    assert store.load() == [keep, recent]
    assert store.save_count == 1


def test_refresh_without_expired_items_does_not_write(clock, t0):
    store = MemoryStore([create_item("Keep", [1], t0)])
    RevisionService(store, clock=clock)
    assert store.save_count == 0


def test_archived_item_survives_six_days_and_not_eight(store, clock):
    service = RevisionService(store, clock=clock)
    item = service.add("X")
    service.archive(item.id)

    clock.advance(days=6)
    assert RevisionService(store, clock=clock).get(item.id) is not None

    clock.advance(days=2)
    assert RevisionService(store, clock=clock).get(item.id) is None


def test_refresh_clamps_levels_beyond_the_schedule(clock, t0):
    item = create_item("X", [1, 2], t0).evolve(level=9)
    store = MemoryStore([item])

    service = RevisionService(store, clock=clock)

    assert service.get(item.id).level == 2
    assert store.save_count == 0


def test_refresh_returns_purged_count(service, store, clock):
    item = service.add("X")
    service.archive(item.id)
    clock.advance(days=7)
    assert service.refresh() == 1
    assert service.items == []


# --- resolve ---


@pytest.fixture
def prefixed_service(clock, t0):
    pairs = [("A", "01HAAA"), ("B", "01HAAB"), ("C", "01JCCC")]
    items = [create_item(title, [1], t0, item_id=item_id) for title, item_id in pairs]
    return RevisionService(MemoryStore(items), clock=clock)


def test_resolve_by_exact_id_and_prefix(prefixed_service):
    assert prefixed_service.resolve("01HAAA").title == "A"
    assert prefixed_service.resolve("01j").title == "C"
    assert prefixed_service.resolve("zzz") is None
    assert prefixed_service.resolve("  ") is None


def test_resolve_ambiguous_prefix_raises(prefixed_service):
    with pytest.raises(AmbiguousItemIdError) as excinfo:
        prefixed_service.resolve("01HAA")
    assert {m.title for m in excinfo.value.matches} == {"A", "B"}
