"""Stitch Markdown sources into one document with provenance markers."""

from __future__ import annotations

from typing import Iterable

SEPARATOR = "\n---\n\n"


def provenance_comment(label: str) -> str:
    return f"<!-- source: {label} -->\n\n"


def stitch_markdown(parts: Iterable[tuple[str, str]], *, source_comments: bool = True) -> str:
    """Join ``(label, text)`` parts in the order given.

    Parts after the first are preceded by a blank line, a ``---`` rule and
    another blank line. Every part ends with a newline in the output.
    """

    chunks: list[str] = []
    for index, (label, text) in enumerate(parts):
        if index > 0:
            chunks.append(SEPARATOR)
        if source_comments:
            chunks.append(provenance_comment(label))
        chunks.append(text if text.endswith("\n") else text + "\n")
    return "".join(chunks)
