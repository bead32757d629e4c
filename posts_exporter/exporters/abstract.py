"""
Exporter interfaces and result contracts for the posts exporter.

Concrete exporters (JSON file, CSV file, SQL database) implement the Exporter
protocol and return an ExportResult TypedDict so the orchestrator and the
reporter can treat every sink the same way.
"""

from __future__ import annotations

import abc
from typing import List, Optional, Protocol, TypedDict, runtime_checkable

from posts_exporter.domain.models import Post


class ExportResult(TypedDict, total=False):
    """
    Summary returned by exporters.

    `destination` is a file path for file sinks and a masked connection
    target for the database sink.
    """

    exporter: str
    records: int
    destination: str
    notes: Optional[str]


@runtime_checkable
class Exporter(Protocol):
    """
    Common interface all exporters must implement.

    Attributes
    ----------
    name : str
        The export type this exporter is selected by (e.g. "json").
    description : str
        A human-friendly summary of the sink.
    """

    name: str
    description: str

    def export(self, posts: List[Post]) -> ExportResult:
        """
        Write the posts to the sink.

        Parameters
        ----------
        posts : list[Post]
            Posts with `hash_id` already assigned.

        Returns
        -------
        ExportResult
            Number of records written and where they went.
        """
        ...


class AbstractExporter(abc.ABC):
    """
    ABC helper for class-based implementations.

    Subclasses set `name` and `description` and implement `export`.
    """

    name: str
    description: str

    @abc.abstractmethod
    def export(self, posts: List[Post]) -> ExportResult:  # pragma: no cover - interface only
        """Write the posts and return a summary."""
        raise NotImplementedError


__all__ = [
    "AbstractExporter",
    "ExportResult",
    "Exporter",
]
