"""Walk a source tree, chunk and embed each file, upsert chunks into the vector index."""

import logging
import threading
import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from codedoc.errors import (
    CodeDocError,
    IngestCancelledError,
    InvalidPathError,
    NoActiveRepositoryError,
    SourceReadError,
)
from codedoc.rag.chunker import DEFAULT_MAX_TOKENS, TokenCounter, chunk_lines, estimate_tokens, should_index_path
from codedoc.rag.embeddings import Embedder
from codedoc.rag.store import VectorIndex
from codedoc.repository import RepositoryContext

logger = logging.getLogger(__name__)
COLLECTION_NAME = "code-docs"
DEFAULT_EXTENSIONS = (".cs", ".py")

# One writer per collection name, shared by every Indexer in the process.
_ingest_locks: dict[str, threading.Lock] = {}
_ingest_locks_guard = threading.Lock()


def _collection_lock(name: str) -> threading.Lock:
    with _ingest_locks_guard:
        return _ingest_locks.setdefault(name, threading.Lock())


def chunk_key(file_path: Path, ordinal: int) -> str:
    """Record key for the ordinal-th chunk of an (absolute) file path."""
    return f"{file_path}#{ordinal}"


@dataclass(frozen=True)
class IngestSummary:
    """Result (or partial progress) of one ingestion run."""

    files_processed: int
    chunks_upserted: int
    root: Path
    collection: str = COLLECTION_NAME

    def describe(self) -> str:
        return (
            f"Ingested {self.files_processed} files, total {self.chunks_upserted} chunks "
            f"into '{self.collection}'."
        )


class Indexer:
    """Populates one collection from a directory tree.

    Keys are "{absolute file path}#{chunk ordinal}", so re-ingesting unchanged
    files overwrites records instead of duplicating them. Records for deleted
    or shrunk files are never removed.
    """

    def __init__(
        self,
        embedder: Embedder,
        index: VectorIndex,
        context: RepositoryContext | None = None,
        collection: str = COLLECTION_NAME,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        token_counter: TokenCounter = estimate_tokens,
    ):
        self.embedder = embedder
        self.index = index
        self.context = context
        self.collection = collection
        self.max_tokens = max_tokens
        self.extensions = tuple(e.lower() for e in extensions)
        self.token_counter = token_counter

    def resolve_root(self, root_path: Path | str | None = None) -> Path:
        """Explicit path, else the context's active repository; must be an existing directory."""
        if root_path is None or not str(root_path).strip():
            active = self.context.get_active_path() if self.context else None
            if active is None:
                raise NoActiveRepositoryError()
            root_path = active
        root = Path(root_path).expanduser()
        if not root.is_dir():
            raise InvalidPathError(str(root_path))
        return root.resolve()

    def iter_files(self, root: Path) -> Iterator[Path]:
        """Files under root matching the extension filter, in sorted path order."""
        for fpath in sorted(root.rglob("*")):
            if not fpath.is_file():
                continue
            if should_index_path(fpath.relative_to(root), self.extensions):
                yield fpath

    def ingest(
        self,
        root_path: Path | str | None = None,
        cancel: threading.Event | None = None,
    ) -> IngestSummary:
        """Chunk, embed and upsert every matching file under root_path.

        Fails fast: an unreadable file, an embedding failure or a store failure
        aborts the run, and the raised CodeDocError carries the progress made
        so far in ``progress``. Records already upserted stay.
        """
        root = self.resolve_root(root_path)
        lock = _collection_lock(self.collection)
        if lock.locked():
            logger.info("rag.index: waiting for running ingestion of '%s'", self.collection)
        with lock:
            return self._ingest_locked(root, cancel)

    def _ingest_locked(self, root: Path, cancel: threading.Event | None) -> IngestSummary:
        t0 = time.monotonic()
        self.index.ensure_collection(self.collection)
        logger.info("rag.index: starting ingest of %s into '%s'", root, self.collection)

        files_processed = 0
        chunks_upserted = 0

        def progress() -> IngestSummary:
            return IngestSummary(files_processed, chunks_upserted, root, self.collection)

        for fpath in self.iter_files(root):
            try:
                content = fpath.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.error("rag.index: could not read %s: %s", fpath, e)
                raise SourceReadError(str(fpath), str(e), progress()) from e
            for ordinal, chunk in enumerate(chunk_lines(content, self.max_tokens, self.token_counter)):
                if cancel is not None and cancel.is_set():
                    logger.warning("rag.index: cancelled at %s", fpath)
                    raise IngestCancelledError(progress())
                key = chunk_key(fpath, ordinal)
                try:
                    vector = self.embedder.embed(chunk.text)
                    logger.debug("rag.index: upserting chunk %s", key)
                    self.index.upsert(self.collection, key, chunk.text, vector)
                except CodeDocError as e:
                    e.progress = progress()
                    logger.error(
                        "rag.index: %s failed for %s after %d files, %d chunks: %s",
                        type(e).__name__, key, files_processed, chunks_upserted, e,
                    )
                    raise
                chunks_upserted += 1
            files_processed += 1
            if files_processed % 50 == 0:
                logger.info("rag.index: %d files, %d chunks so far", files_processed, chunks_upserted)

        if files_processed == 0:
            logger.warning("rag.index: no files matching %s under %s", ", ".join(self.extensions), root)
        logger.info(
            "rag.index: complete, %d files, %d chunks from %s (%.1fs)",
            files_processed, chunks_upserted, root.name, time.monotonic() - t0,
        )
        return progress()

    def watch(self, context: RepositoryContext) -> None:
        """Re-ingest whenever context selects a different repository."""
        context.subscribe(self._on_repository_selected)

    def _on_repository_selected(self, repo_path: Path) -> IngestSummary:
        logger.info("rag.index: auto-ingest for newly selected repo %s", repo_path)
        summary = self.ingest(repo_path)
        logger.info("rag.index: auto-ingest done: %s", summary.describe())
        return summary
