"""Pydantic models passed between the CLI and the merge pipeline."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class MergeRequest(BaseModel):
    """Parsed command line for a single merge run."""

    inputs: list[str] = Field(default_factory=list, description="Files, folders and zip archives in merge order")
    output: str | None = Field(default=None, description="Explicit output path; auto-derived when omitted")
    source_comments: bool = Field(default=True, description="Insert a provenance comment before each item")
    sort_zip: bool = Field(default=True, description="Sort zip entries case-insensitively by path")


class MergeReport(BaseModel):
    """Outcome of a successful merge run."""

    output_path: Path
    merged_count: int = Field(ge=1)
    labels: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
