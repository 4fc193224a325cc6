from pathlib import Path

import pytest

from errors import WriteError
from resources.values import ResourceEntry, ValuesDocument, extract
from resources.writer import render_values_document, write_values_file
from utils.cache import TranslationMemory, make_cache_key
from utils.fileio import atomic_write_text


ENTRIES = [
    ResourceEntry(key="app_name", raw_content='<string name="app_name">Mi App</string>'),
    ResourceEntry(
        key="greeting",
        raw_content='<string name="greeting">Hola <xliff:g id="name">%1$s</xliff:g>!</string>',
    ),
]
XLIFF = {"xliff": "urn:oasis:names:tc:xliff:document:1.2"}


def test_render_writes_one_entry_per_line():
    content = render_values_document(ENTRIES, XLIFF)

    assert content == (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<resources xmlns:xliff="urn:oasis:names:tc:xliff:document:1.2">\n'
        '    <string name="app_name">Mi App</string>\n'
        '    <string name="greeting">Hola <xliff:g id="name">%1$s</xliff:g>!</string>\n'
        "</resources>\n"
    )


def test_render_without_entries_is_an_empty_resources_element():
    assert render_values_document([]) == '<?xml version="1.0" encoding="utf-8"?>\n<resources>\n</resources>\n'


def test_written_file_parses_back(tmp_path: Path):
    destination = tmp_path / "values-es" / "strings.xml"

    write_values_file(destination, ENTRIES, XLIFF)

    document = ValuesDocument.from_file(destination)
    assert [entry.raw_content for entry in extract(document)] == [entry.raw_content for entry in ENTRIES]


def test_atomic_write_replaces_and_leaves_no_temporary_files(tmp_path: Path):
    destination = tmp_path / "values-fr" / "strings.xml"
    atomic_write_text(destination, "old")

    atomic_write_text(destination, "new")

    assert destination.read_text(encoding="utf-8") == "new"
    assert [path.name for path in destination.parent.iterdir()] == ["strings.xml"]


def test_atomic_write_failure_raises_write_error(tmp_path: Path):
    blocker = tmp_path / "values-de"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(WriteError) as excinfo:
        atomic_write_text(blocker / "strings.xml", "content")

    assert excinfo.value.path == blocker / "strings.xml"


def test_translation_memory_persists(tmp_path: Path):
    path = tmp_path / "memory.json"
    key = make_cache_key("Google", "Hello", "en", "es")

    memory = TranslationMemory(path)
    memory.set(key, "Hola")
    memory.flush()

    reloaded = TranslationMemory(path)
    assert reloaded.get(key) == "Hola"
    assert len(reloaded) == 1


def test_unreadable_translation_memory_starts_empty(tmp_path: Path):
    path = tmp_path / "memory.json"
    path.write_text("{not json", encoding="utf-8")

    assert len(TranslationMemory(path)) == 0
