"""Detect whether the process was started by a file-manager double-click or drop."""

from __future__ import annotations

import logging
from pathlib import Path
import sys
from typing import Iterable, TextIO

import psutil

LOGGER = logging.getLogger(__name__)

# Interpreters and launchers that sit between the file manager and us.
LAUNCHER_NAMES = frozenset(
    {"py.exe", "pyw.exe", "python.exe", "pythonw.exe", "python", "python3", "pythonw"}
)


def input_redirected(stream: TextIO | None = None) -> bool:
    """True when stdin is not an interactive terminal."""

    handle = stream if stream is not None else sys.stdin
    if handle is None:
        return True
    try:
        return not handle.isatty()
    except (AttributeError, ValueError):
        return True


def _launcher_names() -> set[str]:
    names = set(LAUNCHER_NAMES)
    script = Path(sys.argv[0]).name.lower() if sys.argv and sys.argv[0] else ""
    if script:
        names.update({script, f"{script}.exe", Path(script).stem})
    return names


def parent_process_name() -> str:
    """Name of the nearest ancestor that is not a Python or script launcher.

    Console-script installs run as ``mdmerge.exe -> python.exe`` on Windows,
    so the launcher itself is skipped along with interpreters.
    """

    skip = _launcher_names()
    for parent in psutil.Process().parents():
        name = parent.name()
        if name.lower() not in skip:
            return name
    return ""


def is_drop_launch(pause_parents: Iterable[str] = ("explorer.exe",)) -> bool:
    """Whether the run looks like a drag-and-drop or double-click launch.

    Detection failures are logged and reported as ``False``.
    """

    try:
        name = parent_process_name()
    except (psutil.Error, OSError) as exc:
        LOGGER.debug("Parent process detection failed: %s", exc)
        return False
    if not name:
        return False
    wanted = {parent.lower() for parent in pause_parents}
    return name.lower() in wanted or f"{name.lower()}.exe" in wanted
