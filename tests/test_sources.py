"""Tests for Markdown source discovery."""

from __future__ import annotations

from pathlib import Path
import zipfile

import pytest

from mdmerge.errors import InputNotFoundError, NothingToMergeError
from mdmerge.sources import (
    MarkdownItem,
    SourceKind,
    classify,
    collect_items,
    count_items,
    directory_markdown_files,
    extension_of,
    iter_zip_items,
)


class RecordingProgress:
    def __init__(self) -> None:
        self.total: int | None = None
        self.started: list[str] = []
        self.done = 0

    def set_total(self, total: int) -> None:
        self.total = total

    def item_started(self, label: str) -> None:
        self.started.append(label)

    def item_done(self) -> None:
        self.done += 1


def _write_zip(path: Path, entries: list[tuple[str, bytes]]) -> Path:
    with zipfile.ZipFile(path, "w") as archive:
        for name, payload in entries:
            archive.writestr(name, payload)
    return path


@pytest.fixture
def docs_zip(tmp_path: Path) -> Path:
    return _write_zip(
        tmp_path / "docs.zip",
        [
            ("guide/", b""),
            ("guide/b.md", b"B"),
            ("__MACOSX/._a.md", b"resource fork"),
            ("__macosx/guide/c.md", b"also metadata"),
            ("A.md", b"A"),
            ("readme.txt", b"not markdown"),
        ],
    )


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("notes.MD", ".md"),
        ("dir.d/file", ""),
        (".md", ".md"),
        ("trailing.", ""),
        ("archive.tar.ZIP", ".zip"),
        ("folder\\doc.Markdown", ".markdown"),
    ],
)
def test_extension_of(name: str, expected: str) -> None:
    assert extension_of(name) == expected


def test_classify_each_kind(tmp_path: Path, docs_zip: Path) -> None:
    (tmp_path / "page.mkdn").write_text("x", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")
    (tmp_path / "folder.zip").mkdir()

    assert classify(tmp_path) is SourceKind.DIRECTORY
    assert classify(tmp_path / "folder.zip") is SourceKind.DIRECTORY
    assert classify(tmp_path / "page.mkdn") is SourceKind.MARKDOWN
    assert classify(docs_zip) is SourceKind.ZIP
    assert classify(tmp_path / "notes.txt") is SourceKind.UNRECOGNIZED
    assert classify(tmp_path / "missing.md") is SourceKind.MISSING


def test_directory_files_sorted_case_insensitively(tmp_path: Path) -> None:
    (tmp_path / "B.MD").write_text("b", encoding="utf-8")
    (tmp_path / "a.md").write_text("a", encoding="utf-8")
    (tmp_path / "skip.txt").write_text("t", encoding="utf-8")
    nested = tmp_path / "sub"
    nested.mkdir()
    (nested / "c.mdtext").write_text("c", encoding="utf-8")

    names = [path.name for path in directory_markdown_files(tmp_path)]

    assert names == ["a.md", "B.MD", "c.mdtext"]


def test_zip_entries_sorted_and_filtered(docs_zip: Path) -> None:
    labels = [item.label for item in iter_zip_items(docs_zip)]

    assert labels == ["docs.zip:A.md", "docs.zip:guide/b.md"]


def test_zip_entries_keep_archive_order_when_unsorted(docs_zip: Path) -> None:
    items = list(iter_zip_items(docs_zip, sort_entries=False))

    assert [item.label for item in items] == ["docs.zip:guide/b.md", "docs.zip:A.md"]
    assert [item.raw for item in items] == [b"B", b"A"]


def test_markdown_item_text_is_normalized() -> None:
    item = MarkdownItem(label="win.md", raw=b"one\r\ntwo\r")

    assert item.text == "one\ntwo\n"


def test_collect_items_in_input_order(tmp_path: Path, docs_zip: Path) -> None:
    folder = tmp_path / "folder"
    folder.mkdir()
    (folder / "y.markdown").write_text("World", encoding="utf-8")
    (folder / "x.md").write_text("Hello", encoding="utf-8")
    loose = tmp_path / "loose.md"
    loose.write_bytes(b"loose")
    unknown = tmp_path / "image.png"
    unknown.write_bytes(b"\x89PNG")
    progress = RecordingProgress()

    batch = collect_items([str(loose), str(docs_zip), str(unknown), str(folder)], progress=progress)

    assert [item.label for item in batch.items] == [
        "loose.md",
        "docs.zip:A.md",
        "docs.zip:guide/b.md",
        "x.md",
        "y.markdown",
    ]
    assert batch.skipped == [str(unknown)]
    assert progress.done == 5
    assert progress.started[1] == "docs.zip:A.md"


def test_collect_items_missing_path_is_fatal(tmp_path: Path) -> None:
    good = tmp_path / "good.md"
    good.write_text("ok", encoding="utf-8")
    missing = tmp_path / "gone.md"

    with pytest.raises(InputNotFoundError) as excinfo:
        collect_items([str(good), str(missing)])

    assert excinfo.value.path == str(missing)
    assert excinfo.value.exit_code == 2


def test_collect_items_nothing_to_merge_reports_skips(tmp_path: Path) -> None:
    empty_zip = _write_zip(tmp_path / "empty.zip", [("readme.txt", b"x"), ("docs/", b"")])
    other = tmp_path / "notes.txt"
    other.write_text("x", encoding="utf-8")

    with pytest.raises(NothingToMergeError) as excinfo:
        collect_items([str(empty_zip), str(other)])

    assert excinfo.value.skipped == [str(other)]


def test_collect_items_corrupt_zip_raises(tmp_path: Path) -> None:
    broken = tmp_path / "broken.zip"
    broken.write_bytes(b"definitely not a zip archive")

    with pytest.raises(zipfile.BadZipFile):
        collect_items([str(broken)])


def test_count_items_tolerates_broken_and_missing_inputs(tmp_path: Path, docs_zip: Path) -> None:
    broken = tmp_path / "broken.zip"
    broken.write_bytes(b"garbage")
    folder = tmp_path / "folder"
    folder.mkdir()
    (folder / "one.md").write_text("1", encoding="utf-8")
    (folder / "two.mkd").write_text("2", encoding="utf-8")

    total = count_items([str(folder), str(docs_zip), str(broken), str(tmp_path / "nope.md")])

    assert total == 4


def test_count_items_never_below_one(tmp_path: Path) -> None:
    assert count_items([str(tmp_path / "nope.md")]) == 1
    assert count_items([]) == 1


def _zip_with_invalid_utf8_name(path: Path) -> Path:
    # Non-ASCII names are stored with the UTF-8 flag; swap in bytes that are not UTF-8.
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("é.md", b"body")
    path.write_bytes(path.read_bytes().replace("é.md".encode("utf-8"), b"\xff\xfe.md"))
    return path


def test_count_items_tolerates_undecodable_entry_names(tmp_path: Path) -> None:
    broken = _zip_with_invalid_utf8_name(tmp_path / "names.zip")
    loose = tmp_path / "ok.md"
    loose.write_text("ok", encoding="utf-8")

    assert count_items([str(broken), str(loose)]) == 1


def test_count_items_tolerates_any_archive_failure(monkeypatch, tmp_path: Path) -> None:
    archive = _write_zip(tmp_path / "future.zip", [("a.md", b"a")])

    def _unsupported(*_args, **_kwargs):
        raise NotImplementedError("zip file version 19.0")

    monkeypatch.setattr("mdmerge.sources.zipfile.ZipFile", _unsupported)

    assert count_items([str(archive)]) == 1
