"""Error kinds raised by the indexing and retrieval pipeline.

Library layers raise these; only the service surface (codedoc.service) turns
them into descriptive strings for callers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codedoc.rag.indexer import IngestSummary


class CodeDocError(Exception):
    """Base class for codedoc failures.

    ``progress`` is set when the failure aborted an ingestion: it holds what
    was upserted before the failure. Those records stay in the collection.
    """

    def __init__(self, message: str, progress: IngestSummary | None = None):
        super().__init__(message)
        self.progress = progress


class InvalidPathError(CodeDocError):
    """Root path for ingestion does not exist or is not a directory."""

    def __init__(self, path: str):
        super().__init__(f"Invalid path: {path}")
        self.path = path


class NoActiveRepositoryError(CodeDocError):
    """No path passed and no active repository selected."""

    def __init__(self) -> None:
        super().__init__("No path provided and no Git repo selected.")


class EmbeddingServiceError(CodeDocError):
    """Embedding provider unreachable or rejected the input."""


class CollectionNotFoundError(CodeDocError):
    """Named collection does not exist in the vector index."""

    def __init__(self, name: str):
        super().__init__(f"Collection not found: {name}")
        self.name = name


class VectorIndexError(CodeDocError):
    """Vector store rejected an operation (e.g. vector dimension mismatch) or is unavailable."""


class SourceReadError(CodeDocError):
    """A source file matched the filter but could not be read."""

    def __init__(self, path: str, reason: str, progress: IngestSummary | None = None):
        super().__init__(f"Could not read {path}: {reason}", progress)
        self.path = path


class IngestCancelledError(CodeDocError):
    """Ingestion stopped via its cancel event."""

    def __init__(self, progress: IngestSummary):
        super().__init__(
            f"Ingestion cancelled after {progress.files_processed} files, "
            f"{progress.chunks_upserted} chunks",
            progress,
        )
