"""
JSON file exporter: the whole batch as one indented JSON array in `posts.json`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List

from posts_exporter.domain.models import Post
from posts_exporter.exporters.abstract import AbstractExporter, ExportResult
from posts_exporter.utils.logging import get_logger

log = get_logger(__name__)

JSON_FILENAME = "posts.json"


class JsonExporter(AbstractExporter):
    """
    Serialize posts with camelCase keys (`userId`, `id`, `title`, `body`, `hashId`).

    Any existing file at the destination is overwritten.
    """

    name: str = "json"
    description: str = "Indented JSON array written to posts.json."

    def __init__(self, output_dir: Path | str = ".") -> None:
        self.path = Path(output_dir) / JSON_FILENAME

    def export(self, posts: List[Post]) -> ExportResult:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [post.to_json_dict() for post in posts]
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
            f.write("\n")

        log.info(
            f"Wrote {len(posts)} posts to {self.path}",
            extra={"exporter": self.name, "records": len(posts), "destination": str(self.path)},
        )
        return ExportResult(exporter=self.name, records=len(posts), destination=str(self.path))


__all__ = ["JSON_FILENAME", "JsonExporter"]
