"""Run one merge from a parsed request to the written document."""

from __future__ import annotations

import logging

from mdmerge.progress import NullProgress, ProgressSink
from mdmerge.schemas import MergeReport, MergeRequest
from mdmerge.sources import collect_items, count_items
from mdmerge.stitch import stitch_markdown
from mdmerge.store import resolve_output_path, write_merged

LOGGER = logging.getLogger(__name__)


def run_merge_job(request: MergeRequest, *, progress: ProgressSink | None = None) -> MergeReport:
    """Enumerate, decode, stitch and write the inputs of ``request``.

    The output file is written once, after the whole document is assembled,
    so any failure before that point leaves nothing on disk.
    """

    sink = progress or NullProgress()
    sink.set_total(count_items(request.inputs))

    output_path = resolve_output_path(request.inputs, request.output)
    LOGGER.debug("Output path resolved to %s", output_path)

    batch = collect_items(request.inputs, sort_zip=request.sort_zip, progress=sink)
    parts = [(item.label, item.text) for item in batch.items]
    merged = stitch_markdown(parts, source_comments=request.source_comments)
    write_merged(output_path, merged)

    for skipped in batch.skipped:
        LOGGER.debug("Skipped input %s", skipped)
    return MergeReport(
        output_path=output_path,
        merged_count=len(batch.items),
        labels=[item.label for item in batch.items],
        skipped=batch.skipped,
    )
