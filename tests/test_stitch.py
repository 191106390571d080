"""Tests for the Markdown stitcher."""

from __future__ import annotations

from mdmerge.stitch import provenance_comment, stitch_markdown


def test_stitch_with_provenance_comments() -> None:
    merged = stitch_markdown([("x.md", "Hello"), ("y.markdown", "World")])

    assert merged == (
        "<!-- source: x.md -->\n\nHello\n\n---\n\n<!-- source: y.markdown -->\n\nWorld\n"
    )


def test_stitch_without_provenance_comments() -> None:
    merged = stitch_markdown([("a.md", "A\n"), ("b.md", "B")], source_comments=False)

    assert merged == "A\n\n---\n\nB\n"


def test_stitch_single_part_has_no_separator() -> None:
    assert stitch_markdown([("only.md", "text\n")], source_comments=False) == "text\n"


def test_stitch_keeps_order_and_existing_trailing_newlines() -> None:
    merged = stitch_markdown([("z.md", "z\n\n"), ("a.md", "a")], source_comments=False)

    assert merged == "z\n\n\n---\n\na\n"


def test_stitch_empty_text_still_gets_newline() -> None:
    assert stitch_markdown([("empty.md", "")]) == "<!-- source: empty.md -->\n\n\n"


def test_provenance_comment_uses_label_verbatim() -> None:
    assert provenance_comment("docs.zip:a/b.md") == "<!-- source: docs.zip:a/b.md -->\n\n"
