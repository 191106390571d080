"""Output path resolution and the single write of the merged document."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Sequence

from mdmerge.errors import OutputPathExhaustedError
from mdmerge.sources import extension_of

LOGGER = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".md"
DEFAULT_BASE_NAME = "merged"
MAX_UNIQUE_ATTEMPTS = 10_000


def ensure_md_extension(path: str | Path) -> Path:
    """Append ``.md`` unless ``path`` already ends with it (any case)."""

    text = str(path)
    if text.lower().endswith(OUTPUT_SUFFIX):
        return Path(text)
    return Path(text + OUTPUT_SUFFIX)


def make_unique_path(path: Path) -> Path:
    """Return ``path`` or the first free ``<stem> (n)<suffix>`` sibling."""

    if not path.exists():
        return path
    for counter in range(1, MAX_UNIQUE_ATTEMPTS):
        candidate = path.with_name(f"{path.stem} ({counter}){path.suffix}")
        if not candidate.exists():
            return candidate
    raise OutputPathExhaustedError(str(path))


def auto_output_path(inputs: Sequence[str | Path]) -> Path:
    """Derive a non-clobbering output path from the first input.

    The document lands next to the first input (inside it for a folder, in
    the working directory when it does not exist). A single file input
    ``notes.md`` yields ``notes_merged.md``; anything else yields
    ``merged.md``.
    """

    first = Path(inputs[0]) if inputs else None
    if first is not None and first.is_dir():
        directory = Path(os.path.abspath(first))
    elif first is not None and first.is_file():
        directory = Path(os.path.abspath(first)).parent
    else:
        directory = Path.cwd()

    if len(inputs) == 1 and first is not None and first.is_file():
        name = first.name
        ext = extension_of(name)
        base_name = f"{name[: len(name) - len(ext)]}_merged"
    else:
        base_name = DEFAULT_BASE_NAME
    return make_unique_path(directory / f"{base_name}{OUTPUT_SUFFIX}")


def resolve_output_path(inputs: Sequence[str | Path], explicit: str | Path | None = None) -> Path:
    if explicit is not None and str(explicit).strip():
        return ensure_md_extension(explicit)
    return auto_output_path(inputs)


def write_merged(path: Path, text: str) -> Path:
    """Write ``text`` as UTF-8 without BOM, creating parent folders as needed."""

    target = Path(os.path.abspath(path))
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(text.encode("utf-8"))
    LOGGER.info("Wrote %d characters to %s", len(text), target)
    return path
