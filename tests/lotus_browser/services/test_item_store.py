import json

import pytest

from lotus_browser.core.records import identity_key
from lotus_browser.services.item_store import SAVED_STUDIES_SLOT, ItemStore
from lotus_browser.services.storage import BrowserSlotStorage, SlotStorage

SAVED_AT = "2024-03-01T12:00:00+00:00"


class _FailingStorage(SlotStorage):
    """Reads fine, refuses every write (quota exceeded)."""

    def __init__(self, initial=None):
        self.data = dict(initial or {})

    def get_item(self, slot):
        return self.data.get(slot)

    def set_item(self, slot, value):
        raise OSError("quota exceeded")

    def remove_item(self, slot):
        raise OSError("storage disabled")


class _UnreadableStorage(_FailingStorage):
    def get_item(self, slot):
        raise OSError("storage disabled")


@pytest.fixture
def storage():
    return BrowserSlotStorage()


@pytest.fixture
def store(storage):
    return ItemStore(storage, clock=lambda: SAVED_AT)


def _study(year=2010, title="Fear circuits", authors="Smith A", **extra):
    return {"year": year, "title": title, "authors": authors, **extra}


def test_save_appends_with_saved_at(store, storage):
    assert store.save(_study(journal="Neuron"))

    items = store.items
    assert items == [
        {"year": 2010, "title": "Fear circuits", "authors": "Smith A", "journal": "Neuron", "savedAt": SAVED_AT}
    ]
    assert list(items[0])[-1] == "savedAt"
    assert json.loads(storage.data[SAVED_STUDIES_SLOT]) == items


def test_duplicate_identity_is_rejected(store):
    assert store.save(_study(journal="Neuron"))
    assert not store.save(_study(journal="Cortex"))

    assert len(store) == 1
    assert store.items[0]["journal"] == "Neuron"


def test_same_title_different_year_is_a_different_study(store):
    assert store.save(_study(year=2010))
    assert store.save(_study(year=2011))

    assert len(store) == 2


def test_contains_and_index_of(store):
    store.save(_study(title="A"))
    store.save(_study(title="B"))

    assert store.contains(_study(title="B", journal="anything"))
    assert not store.contains(_study(title="C"))
    assert store.index_of(identity_key(_study(title="B"))) == 1
    assert store.index_of(identity_key(_study(title="C"))) is None


def test_remove_at_uses_insertion_order(store):
    for title in ("A", "B", "C"):
        store.save(_study(title=title))

    assert store.remove_at(1)

    assert [s["title"] for s in store.items] == ["A", "C"]


def test_remove_at_out_of_range_is_rejected(store):
    store.save(_study())

    assert not store.remove_at(1)
    assert not store.remove_at(-1)
    assert not store.remove_at("0")
    assert len(store) == 1


def test_every_mutation_rereads_the_slot(storage):
    first = ItemStore(storage, clock=lambda: SAVED_AT)
    second = ItemStore(storage, clock=lambda: SAVED_AT)
    assert second.items == []

    first.save(_study(title="From first"))
    second.save(_study(title="From second"))

    assert [s["title"] for s in first.load()] == ["From first", "From second"]


@pytest.mark.parametrize("blob", ["not-json", "{}", "42", "null", ""])
def test_malformed_slot_reads_as_empty(blob):
    store = ItemStore(BrowserSlotStorage({SAVED_STUDIES_SLOT: blob}))

    assert store.load() == []


def test_non_object_entries_are_dropped():
    blob = json.dumps([_study(), "junk", 3, None])
    store = ItemStore(BrowserSlotStorage({SAVED_STUDIES_SLOT: blob}))

    assert store.load() == [_study()]


def test_failed_write_leaves_store_unchanged():
    storage = _FailingStorage({SAVED_STUDIES_SLOT: json.dumps([_study(title="Kept")])})
    store = ItemStore(storage, clock=lambda: SAVED_AT)

    assert not store.save(_study(title="New"))
    assert not store.remove_at(0)
    assert not store.clear_all()
    assert [s["title"] for s in store.items] == ["Kept"]


def test_unreadable_storage_reads_as_empty():
    store = ItemStore(_UnreadableStorage())

    assert store.load() == []
    assert len(store) == 0


def test_clear_all_removes_slot(store, storage):
    store.save(_study())

    assert store.clear_all()

    assert SAVED_STUDIES_SLOT not in storage.data
    assert store.items == []


def test_export_all(store):
    store.save(_study(title="Émotion", journal="Neuron"))
    before = store.items

    artifact = store.export_all(today="2024-03-01")

    assert artifact.filename == "lotus-saved-studies-2024-03-01.json"
    assert artifact.mime_type == "application/json"
    assert json.loads(artifact.content) == before
    assert "Émotion" in artifact.content
    assert artifact.content.startswith("[\n  {")
    assert store.items == before


def test_export_of_empty_store(store):
    assert json.loads(store.export_all(today="2024-03-01").content) == []


def test_remove_key_finds_study_regardless_of_position(store):
    for title in ("A", "B", "C"):
        store.save(_study(title=title))

    assert store.remove_key(identity_key(_study(title="C")))
    assert not store.remove_key(identity_key(_study(title="C")))

    assert [s["title"] for s in store.items] == ["A", "B"]


def test_remove_key_sees_writes_from_other_instances(storage):
    stale = ItemStore(storage, clock=lambda: SAVED_AT)
    assert stale.items == []

    ItemStore(storage, clock=lambda: SAVED_AT).save(_study(title="Elsewhere"))

    assert stale.remove_key(identity_key(_study(title="Elsewhere")))
    assert stale.items == []
