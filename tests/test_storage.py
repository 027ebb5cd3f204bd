# tests/test_storage.py
import json
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from studyspace.core.state import DocumentKind, Theme
from studyspace.core.storage import RecentDocumentEntry, StorageAdapter, StorageKey, StoredDocument


def test_missing_key_reads_as_none(storage):
    assert storage.get(StorageKey.THEME) is None
    assert storage.get(StorageKey.RECENT_DOCUMENTS) is None


def test_values_read_back_equal(storage):
    document = StoredDocument(kind=DocumentKind.VIDEO, source="https://youtu.be/abc123", title="Lecture 1")
    entries = [RecentDocumentEntry(kind=DocumentKind.TEXT, source="notes", title="Notes",
                                   timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc), last_page=1)]
    storage.set(StorageKey.THEME, Theme.DARK)
    storage.set(StorageKey.LAST_DOCUMENT, document)
    storage.set(StorageKey.CURRENT_PAGE, 7)
    storage.set(StorageKey.RECENT_DOCUMENTS, entries)

    assert storage.get(StorageKey.THEME) == Theme.DARK
    assert storage.get(StorageKey.LAST_DOCUMENT) == document
    assert storage.get(StorageKey.CURRENT_PAGE) == 7
    assert storage.get(StorageKey.RECENT_DOCUMENTS) == entries


def test_delete_removes_value(storage):
    storage.set(StorageKey.CURRENT_PAGE, 3)
    storage.delete(StorageKey.CURRENT_PAGE)
    assert storage.get(StorageKey.CURRENT_PAGE) is None
    storage.delete(StorageKey.CURRENT_PAGE)


def test_file_backend_persists_across_instances(tmp_path):
    path = str(tmp_path / "nested" / "storage.json")
    StorageAdapter(path).set(StorageKey.THEME, Theme.DARK)
    assert StorageAdapter(path).get(StorageKey.THEME) == Theme.DARK


def test_malformed_values_read_as_none(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text(json.dumps({
        StorageKey.THEME.value: '"purple"',
        StorageKey.CURRENT_PAGE.value: "0",
        StorageKey.LAST_DOCUMENT.value: "{not json",
        StorageKey.RECENT_DOCUMENTS.value: '[{"title": "missing fields"}]',
    }), encoding="utf-8")
    storage = StorageAdapter(str(path))
    for key in StorageKey:
        assert storage.get(key) is None


def test_corrupt_file_reads_as_none_and_is_replaced_on_write(tmp_path):
    path = tmp_path / "storage.json"
    path.write_text("this is not json", encoding="utf-8")
    storage = StorageAdapter(str(path))
    assert storage.get(StorageKey.THEME) is None
    storage.set(StorageKey.THEME, Theme.LIGHT)
    assert storage.get(StorageKey.THEME) == Theme.LIGHT


def test_unavailable_store_reads_as_none(tmp_path):
    # A directory where the file should be makes every read fail.
    path = tmp_path / "storage.json"
    path.mkdir()
    storage = StorageAdapter(str(path))
    assert storage.get(StorageKey.CURRENT_PAGE) is None
    storage.set(StorageKey.CURRENT_PAGE, 2)
    assert storage.get(StorageKey.CURRENT_PAGE) is None


def test_concurrent_writes_keep_other_keys(tmp_path):
    storage = StorageAdapter(str(tmp_path / "storage.json"))
    storage.set(StorageKey.THEME, Theme.DARK)

    def write_pages(offset):
        for page in range(1, 101):
            storage.set(StorageKey.CURRENT_PAGE, page + offset)

    with ThreadPoolExecutor(max_workers=4) as pool:
        writers = [pool.submit(write_pages, offset) for offset in (0, 100, 200)]
        themes = [storage.get(StorageKey.THEME) for _ in range(300)]
        for writer in writers:
            writer.result()

    assert set(themes) == {Theme.DARK}
    assert storage.get(StorageKey.THEME) == Theme.DARK
    assert storage.get(StorageKey.CURRENT_PAGE) in {100, 200, 300}
    assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]
