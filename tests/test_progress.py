from __future__ import annotations

import io

from rich.console import Console

from mdmerge.progress import NullProgress, RichProgress, _shorten


def test_null_progress_accepts_updates() -> None:
    sink = NullProgress()

    sink.set_total(3)
    sink.item_started("a.md")
    sink.item_done()


def test_rich_progress_tracks_counts() -> None:
    console = Console(file=io.StringIO(), force_terminal=False)

    with RichProgress(console, refresh_per_second=20) as progress:
        progress.set_total(2)
        progress.item_started("docs.zip:[draft]/a.md")
        progress.item_done()
        progress.item_started("b.md")
        progress.item_done()
        task = progress._progress.tasks[0]

        assert task.completed == 2
        assert task.total == 2
        assert task.description == "b.md"


def test_rich_progress_total_never_zero() -> None:
    console = Console(file=io.StringIO(), force_terminal=False)

    with RichProgress(console) as progress:
        progress.set_total(0)

        assert progress._progress.tasks[0].total == 1


def test_shorten_long_labels() -> None:
    label = "x" * 200

    shortened = _shorten(label)

    assert len(shortened) == 160
    assert shortened.endswith("...")
    assert _shorten("short.md") == "short.md"
