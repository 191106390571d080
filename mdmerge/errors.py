"""Failures raised by the merge pipeline and mapped to exit codes by the CLI."""

from __future__ import annotations

from typing import Sequence


class MergeError(Exception):
    """Base class for expected merge failures."""

    exit_code = 1


class InputNotFoundError(MergeError):
    """An input path is neither an existing directory nor an existing file."""

    exit_code = 2

    def __init__(self, path: str) -> None:
        super().__init__(f"Not found: {path}")
        self.path = path


class NothingToMergeError(MergeError):
    """Every input was classified but no Markdown item came out of them."""

    exit_code = 2

    def __init__(self, skipped: Sequence[str] = ()) -> None:
        super().__init__("No Markdown files found to merge.")
        self.skipped = list(skipped)


class OutputPathExhaustedError(MergeError):
    """Every numbered candidate next to the auto output path is taken."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Could not find a free output path next to {path}")
        self.path = path
