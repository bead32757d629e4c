"""
Exporters package for the posts exporter.

Re-exports the abstract interfaces and the concrete exporters so downstream
code can import from `posts_exporter.exporters` directly.
"""

from posts_exporter.exporters.abstract import AbstractExporter, ExportResult, Exporter
from posts_exporter.exporters.csv_exporter import CsvExporter
from posts_exporter.exporters.json_exporter import JsonExporter
from posts_exporter.exporters.sql_exporter import SqlExporter

__all__ = [
    # Abstracts
    "AbstractExporter",
    "ExportResult",
    "Exporter",
    # Concrete exporters
    "CsvExporter",
    "JsonExporter",
    "SqlExporter",
]
