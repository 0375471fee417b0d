from docshell.services.document_store import FileDocumentStore


def test_loads_once_and_caches(tmp_path):
    path = tmp_path / "note.md"
    path.write_text("hello", encoding="utf-8")
    docs = FileDocumentStore()

    assert docs.ensure_document_loaded(str(path)) is True
    path.write_text("changed", encoding="utf-8")
    assert docs.ensure_document_loaded(str(path)) is True
    assert docs.content(str(path)) == "hello"
    assert docs.loaded_paths() == [str(path)]


def test_missing_file_is_rejected(tmp_path):
    docs = FileDocumentStore()
    target = str(tmp_path / "missing.md")

    assert docs.ensure_document_loaded(target) is False
    assert not docs.is_loaded(target)
    assert docs.content(target) is None


def test_forget(tmp_path):
    path = tmp_path / "note.md"
    path.write_text("x", encoding="utf-8")
    docs = FileDocumentStore()
    docs.ensure_document_loaded(str(path))

    docs.forget(str(path))
    docs.forget(str(path))
    assert not docs.is_loaded(str(path))


def test_display_name():
    assert FileDocumentStore.display_name("/a/b/readme.md") == "readme.md"
