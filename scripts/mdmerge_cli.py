#!/usr/bin/env python3
"""Merge Markdown files, folders and zip archives into a single document."""

from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import Iterator, NoReturn, Sequence

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from mdmerge.errors import MergeError, NothingToMergeError
from mdmerge.jobs import run_merge_job
from mdmerge.launch import input_redirected, is_drop_launch
from mdmerge.progress import NullProgress, ProgressSink, RichProgress
from mdmerge.schemas import MergeReport, MergeRequest
from mdmerge.settings import MergeDefaults, Settings, get_settings

LOGGER = logging.getLogger(__name__)

console = Console()
cli = typer.Typer(help="Merge Markdown files, folders and zip archives", add_completion=False)

USAGE = """Usage:
  mdmerge <inputs...> [-o <output.md>] [--no-source] [--no-sort-zip]
  mdmerge -i <inputs...> [-o <output.md>] [--no-source] [--no-sort-zip]

Inputs:
  Any mix of zip archives, Markdown files and folders.
  Dropping files onto the program works too; dropped paths become inputs.

Output:
  Without -o the result is written next to the first input,
  numbered as "merged (1).md", "merged (2).md", ... to avoid overwriting.

Options:
  -i             list several inputs (plain paths work as well)
  -o             output file (derived automatically when omitted)
  --no-source    do not insert <!-- source: ... --> comments
  --no-sort-zip  keep zip entries in archive order
"""


class UnknownOptionError(ValueError):
    def __init__(self, token: str) -> None:
        super().__init__(f"Unknown option: {token}")
        self.token = token


def _trim_quotes(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def parse_args(tokens: Sequence[str], *, defaults: MergeDefaults | None = None) -> MergeRequest:
    """Parse raw command-line tokens.

    ``-i`` consumes every following token up to the next one starting with
    ``-``. Unknown ``-`` tokens raise :class:`UnknownOptionError`.
    """

    base = defaults or MergeDefaults()
    inputs: list[str] = []
    output: str | None = None
    source_comments = base.source_comments
    sort_zip = base.sort_zip

    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token == "-i":
            index += 1
            while index < len(tokens) and not tokens[index].startswith("-"):
                inputs.append(_trim_quotes(tokens[index]))
                index += 1
            continue
        if token == "-o":
            if index + 1 >= len(tokens):
                raise ValueError("-o requires an output path")
            index += 1
            output = _trim_quotes(tokens[index])
        elif token == "--no-source":
            source_comments = False
        elif token == "--no-sort-zip":
            sort_zip = False
        elif token.startswith("-"):
            raise UnknownOptionError(token)
        else:
            inputs.append(_trim_quotes(token))
        index += 1

    return MergeRequest(inputs=inputs, output=output, source_comments=source_comments, sort_zip=sort_zip)


def _configure_logging(settings: Settings) -> None:
    handlers: list[logging.Handler] = [
        RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
    ]
    if settings.logging.log_file:
        settings.logging.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.logging.log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        handlers.append(file_handler)
    logging.basicConfig(level=settings.logging.level, format="%(message)s", handlers=handlers)
    logging.getLogger("mdmerge").setLevel(settings.logging.level)


def _pause_if_drop_launched(settings: Settings) -> None:
    if input_redirected():
        return
    if is_drop_launch(settings.console.pause_parents):
        console.print()
        console.input("[cyan]Press Enter to exit.[/]")


def _fail(message: str, settings: Settings, *, code: int, skipped: Sequence[str] = ()) -> NoReturn:
    console.print(f"[red]{escape(message)}[/]", soft_wrap=True)
    if skipped:
        console.print(f"[yellow]Skipped: {len(skipped)} input(s)[/]")
    _pause_if_drop_launched(settings)
    raise typer.Exit(code=code)


@contextmanager
def _progress_sink(settings: Settings) -> Iterator[ProgressSink]:
    if settings.console.progress and console.is_terminal:
        with RichProgress(console) as progress:
            yield progress
    else:
        yield NullProgress()


def _print_report(report: MergeReport) -> None:
    console.print(f"[green]Done: {escape(str(report.output_path))}[/]", soft_wrap=True)
    console.print(f"Merged: {report.merged_count} item(s)")
    if report.skipped:
        console.print(f"[yellow]Skipped: {len(report.skipped)} input(s)[/]")


@cli.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
    add_help_option=False,
)
def merge(ctx: typer.Context) -> None:
    """Merge Markdown files, folders and zip archives into one document."""

    settings = get_settings()
    _configure_logging(settings)

    try:
        request = parse_args(ctx.args, defaults=settings.merge)
    except ValueError as exc:
        _fail(f"Error: {exc}", settings, code=1)

    if not request.inputs:
        console.print(USAGE, markup=False, highlight=False)
        if not input_redirected():
            console.print("Drop zip / Markdown / folders onto mdmerge to run it.")
            console.input("[cyan]Press Enter to exit.[/]")
        raise typer.Exit(code=2)

    try:
        with _progress_sink(settings) as progress:
            report = run_merge_job(request, progress=progress)
    except NothingToMergeError as exc:
        _fail(str(exc), settings, code=exc.exit_code, skipped=exc.skipped)
    except MergeError as exc:
        _fail(str(exc), settings, code=exc.exit_code)
    except Exception as exc:  # noqa: BLE001 - every other failure maps to exit 1
        LOGGER.debug("Merge failed", exc_info=True)
        _fail(f"Error: {exc}", settings, code=1)

    _print_report(report)
    _pause_if_drop_launched(settings)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
