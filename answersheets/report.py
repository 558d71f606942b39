"""
Run accounting: what a run fetched, what it skipped, and why.

Provides:
  - RunReport: dataclass the engine fills in as it drains the script.
  - SkipRecord: single skip event with a category and the destination path.

Skip categories (for SkipRecord.category):
    not_of_interest  : a subject filter is set and the path is not its document
    already_present  : the file exists from an earlier run
    pdf_disabled     : the run was started with --skip-pdfs
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from utils.common import format_bytes


@dataclass
class SkipRecord:
    """One destination that was not fetched, with a machine-readable category."""

    category: str
    item: str

    def to_dict(self) -> dict[str, str]:
        return {"category": self.category, "item": self.item}


@dataclass
class RunReport:
    """Structured summary of one run of an instruction script."""

    archive_name: str = ""
    status: str = "not_started"               # started | completed | failed
    start_time: float = field(default_factory=time.time)
    elapsed_seconds: float = 0.0
    fetched: list[str] = field(default_factory=list)
    refetched: list[str] = field(default_factory=list)
    skips: list[SkipRecord] = field(default_factory=list)
    bytes_written: int = 0
    archive_path: Path | None = None

    # ── helpers ───────────────────────────────────────────────────────────

    def add_fetch(self, item: str, size: int) -> None:
        self.fetched.append(item)
        self.bytes_written += size

    def add_refetch(self, item: str) -> None:
        self.refetched.append(item)

    def add_skip(self, category: str, item: str) -> None:
        self.skips.append(SkipRecord(category=category, item=item))

    @property
    def items_fetched(self) -> int:
        return len(self.fetched)

    @property
    def items_skipped(self) -> int:
        return len(self.skips)

    def skip_counts_by_category(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for s in self.skips:
            counts[s.category] = counts.get(s.category, 0) + 1
        return counts

    def finish(self, status: str) -> None:
        self.status = status
        self.elapsed_seconds = time.time() - self.start_time

    def console_summary(self) -> str:
        """One-line summary suitable for the terminal."""
        parts = [f"{self.items_fetched:,} saved ({format_bytes(self.bytes_written)})"]
        if self.refetched:
            parts.append(f"{len(self.refetched):,} refetched")
        if self.skips:
            cats = self.skip_counts_by_category()
            skip_parts = [f"{v} {k.replace('_', ' ')}" for k, v in sorted(cats.items())]
            parts.append(f"{self.items_skipped:,} skipped ({', '.join(skip_parts)})")
        return " | ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "archive_name": self.archive_name,
            "status": self.status,
            "elapsed_seconds": round(self.elapsed_seconds, 2),
            "items_fetched": self.items_fetched,
            "items_skipped": self.items_skipped,
            "bytes_written": self.bytes_written,
        }
        if self.refetched:
            d["refetched"] = list(self.refetched)
        if self.skips:
            d["skips"] = [s.to_dict() for s in self.skips]
        if self.archive_path is not None:
            d["archive_path"] = str(self.archive_path)
        return d
