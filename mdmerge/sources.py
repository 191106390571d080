"""Discover Markdown items across loose files, folders and zip archives."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
from pathlib import Path
from typing import Iterator, Sequence
import zipfile

from mdmerge.decoding import decode_markdown
from mdmerge.errors import InputNotFoundError, NothingToMergeError
from mdmerge.progress import NullProgress, ProgressSink

LOGGER = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = frozenset({".md", ".markdown", ".mdown", ".mkd", ".mkdn", ".mdtxt", ".mdtext"})
ZIP_EXTENSION = ".zip"
ZIP_METADATA_PREFIX = "__MACOSX/"


class SourceKind(str, Enum):
    """How a top-level input is handled."""

    DIRECTORY = "DIRECTORY"
    MARKDOWN = "MARKDOWN"
    ZIP = "ZIP"
    UNRECOGNIZED = "UNRECOGNIZED"
    MISSING = "MISSING"


@dataclass(frozen=True, slots=True)
class MarkdownItem:
    """One Markdown source and the label used in its provenance comment."""

    label: str
    raw: bytes

    @property
    def text(self) -> str:
        return decode_markdown(self.raw)


@dataclass(slots=True)
class SourceBatch:
    items: list[MarkdownItem] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def extension_of(name: str) -> str:
    """Lower-cased extension of the last path segment, dot included.

    Unlike :attr:`Path.suffix`, a leading dot counts, so ``.md`` on its own
    is a Markdown file name.
    """

    base = name.replace("\\", "/").rsplit("/", 1)[-1]
    dot = base.rfind(".")
    if dot < 0 or dot == len(base) - 1:
        return ""
    return base[dot:].lower()


def is_markdown_name(name: str) -> bool:
    return extension_of(name) in MARKDOWN_EXTENSIONS


def _sort_key(value: str) -> str:
    return value.upper()


def classify(path: str | Path) -> SourceKind:
    candidate = Path(path)
    if candidate.is_dir():
        return SourceKind.DIRECTORY
    if not candidate.is_file():
        return SourceKind.MISSING
    ext = extension_of(str(candidate))
    if ext == ZIP_EXTENSION:
        return SourceKind.ZIP
    if ext in MARKDOWN_EXTENSIONS:
        return SourceKind.MARKDOWN
    return SourceKind.UNRECOGNIZED


def directory_markdown_files(root: str | Path) -> list[Path]:
    """Recursively list Markdown files under ``root`` sorted case-insensitively by full path."""

    found = [path for path in Path(root).rglob("*") if path.is_file() and is_markdown_name(path.name)]
    return sorted(found, key=lambda path: _sort_key(str(path)))


def _zip_markdown_entries(archive: zipfile.ZipFile, *, sort_entries: bool) -> list[zipfile.ZipInfo]:
    entries = [
        info
        for info in archive.infolist()
        if info.filename
        and not info.filename.endswith("/")
        and not info.filename.upper().startswith(ZIP_METADATA_PREFIX.upper())
        and is_markdown_name(info.filename)
    ]
    if sort_entries:
        entries.sort(key=lambda info: _sort_key(info.filename))
    return entries


def iter_zip_items(zip_path: str | Path, *, sort_entries: bool = True) -> Iterator[MarkdownItem]:
    """Yield Markdown entries of ``zip_path`` labelled ``<archive name>:<entry path>``.

    Raises ``zipfile.BadZipFile`` for corrupt archives.
    """

    archive_name = Path(zip_path).name
    with zipfile.ZipFile(zip_path) as archive:
        for info in _zip_markdown_entries(archive, sort_entries=sort_entries):
            yield MarkdownItem(label=f"{archive_name}:{info.filename}", raw=archive.read(info))


def count_items(inputs: Sequence[str | Path]) -> int:
    """Estimate how many items :func:`collect_items` will produce.

    Only used for progress display: missing inputs and unreadable archives
    count as zero and the result is never below one.
    """

    total = 0
    for entry in inputs:
        kind = classify(entry)
        if kind is SourceKind.DIRECTORY:
            total += len(directory_markdown_files(entry))
        elif kind is SourceKind.MARKDOWN:
            total += 1
        elif kind is SourceKind.ZIP:
            try:
                with zipfile.ZipFile(entry) as archive:
                    total += len(_zip_markdown_entries(archive, sort_entries=False))
            except Exception as exc:  # noqa: BLE001 - unreadable archives count as zero
                LOGGER.debug("Could not count entries of %s: %s", entry, exc)
    return max(total, 1)


def collect_items(
    inputs: Sequence[str | Path],
    *,
    sort_zip: bool = True,
    progress: ProgressSink | None = None,
) -> SourceBatch:
    """Resolve ``inputs`` into ordered Markdown items.

    Inputs are handled in the order given. A path that does not exist stops
    the run with :class:`InputNotFoundError`; files with unrecognized
    extensions land in ``SourceBatch.skipped``. When nothing was found at all
    :class:`NothingToMergeError` carries the skip list.
    """

    sink = progress or NullProgress()
    batch = SourceBatch()
    for entry in inputs:
        kind = classify(entry)
        LOGGER.debug("Input %s classified as %s", entry, kind.value)
        if kind is SourceKind.MISSING:
            raise InputNotFoundError(str(entry))
        if kind is SourceKind.DIRECTORY:
            for path in directory_markdown_files(entry):
                sink.item_started(str(path))
                batch.items.append(MarkdownItem(label=path.name, raw=path.read_bytes()))
                sink.item_done()
        elif kind is SourceKind.ZIP:
            for item in iter_zip_items(entry, sort_entries=sort_zip):
                sink.item_started(item.label)
                batch.items.append(item)
                sink.item_done()
        elif kind is SourceKind.MARKDOWN:
            path = Path(entry)
            sink.item_started(str(entry))
            batch.items.append(MarkdownItem(label=path.name, raw=path.read_bytes()))
            sink.item_done()
        else:
            LOGGER.debug("Skipping unrecognized input %s", entry)
            batch.skipped.append(str(entry))

    if not batch.items:
        raise NothingToMergeError(batch.skipped)
    return batch
