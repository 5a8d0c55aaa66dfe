"""Search across notes, images and PDFs."""

import pytest

from models.vault_item import ImageItem, Note, PDFItem


class _CountingStorage:
    def __init__(self):
        self.reads = 0

    def get(self, key):
        self.reads += 1
        return None

    def set(self, key, value):
        raise AssertionError("search must not write")


@pytest.mark.parametrize("query", ["", "   ", "\t\n"])
def test_blank_query_returns_nothing_without_reading(query):
    from models.vault_store import VaultStore

    storage = _CountingStorage()
    assert VaultStore(storage).search_items(query) == []
    assert storage.reads == 0


def test_case_insensitive_title_and_content(store):
    by_title = store.save_note(title="ABC list", content="")
    by_content = store.save_note(title="other", content="xxabcxx")
    store.save_note(title="nothing", content="here")
    assert store.search_items("aBc") == [by_title, by_content]


def test_binary_payload_is_not_searched(store):
    store.save_image(title="holiday", data_url="data:image/png;base64,abc")
    hit = store.save_pdf(title="ABC report", data_url="data:application/pdf;base64,")
    assert store.search_items("abc") == [hit]


def test_results_grouped_notes_images_pdfs(store):
    pdf = store.save_pdf(title="q pdf", data_url="x")
    image = store.save_image(title="q image", data_url="x")
    note2 = store.save_note(title="second", content="q")
    note1 = store.save_note(title="q first", content="")
    results = store.search_items("q")
    assert results == [note2, note1, image, pdf]
    assert [type(r) for r in results] == [Note, Note, ImageItem, PDFItem]


def test_query_is_not_trimmed_for_matching(store):
    store.save_note(title="milk", content="")
    assert store.search_items(" milk") == []


def test_shopping_scenario(store):
    note = store.save_note(title="Shopping", content="milk, eggs")
    assert note.id
    assert note.type.value == "note"
    assert note.created_at == note.updated_at

    assert store.search_items("milk") == [note]

    updated = store.update_note(note.id, content="milk, eggs, bread")
    assert store.search_items("bread") == [updated]
    assert store.search_items("milk") == [updated]

    assert store.delete_note(note.id) is True
    assert note.id not in [n.id for n in store.get_notes()]
    assert store.search_items("milk") == []
