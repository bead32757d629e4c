"""
CSV file exporter: header row plus one row per post in `posts.csv`.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import List

from posts_exporter.domain.models import Post
from posts_exporter.exporters.abstract import AbstractExporter, ExportResult
from posts_exporter.utils.logging import get_logger

log = get_logger(__name__)

CSV_FILENAME = "posts.csv"


class CsvExporter(AbstractExporter):
    """
    Write posts as CSV with columns UserId, Id, Title, Body, HashId.

    Fields containing commas, quotes or newlines are quoted, so N posts always
    produce N+1 CSV records. Any existing file is overwritten.
    """

    name: str = "csv"
    description: str = "Header plus one row per post written to posts.csv."

    def __init__(self, output_dir: Path | str = ".") -> None:
        self.path = Path(output_dir) / CSV_FILENAME

    def export(self, posts: List[Post]) -> ExportResult:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(Post.csv_header())
            writer.writerows(post.as_row() for post in posts)

        log.info(
            f"Wrote {len(posts)} posts to {self.path}",
            extra={"exporter": self.name, "records": len(posts), "destination": str(self.path)},
        )
        return ExportResult(exporter=self.name, records=len(posts), destination=str(self.path))


__all__ = ["CSV_FILENAME", "CsvExporter"]
