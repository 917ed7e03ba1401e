"""Search the code index by semantic similarity, re-indexing when it is empty or missing."""

import enum
import logging
import time
from dataclasses import dataclass, field

from codedoc.errors import CodeDocError, CollectionNotFoundError
from codedoc.rag.embeddings import Embedder
from codedoc.rag.indexer import Indexer, IngestSummary
from codedoc.rag.store import SearchMatch, VectorIndex

logger = logging.getLogger(__name__)
DEFAULT_TOP_K = 5

EMPTY_REINDEXED_MESSAGE = "No results found. The repo has now been indexed, try again."
MISSING_REINDEXED_PREFIX = "Collection was missing. Auto-ingested:\n"


class SearchStatus(enum.Enum):
    FOUND = "found"
    REINDEXED_EMPTY = "reindexed_empty"
    REINDEXED_MISSING = "reindexed_missing"


@dataclass
class SearchOutcome:
    """What one search call did. After a re-index, the caller must search again."""

    status: SearchStatus
    message: str
    matches: list[SearchMatch] = field(default_factory=list)
    ingest: IngestSummary | None = None
    ingest_error: str | None = None

    @property
    def needs_retry(self) -> bool:
        return self.status is not SearchStatus.FOUND


def format_matches(matches: list[SearchMatch]) -> str:
    """One "- {text}" bullet per match, newline-terminated."""
    return "".join(f"- {m.text}\n" for m in matches)


class Searcher:
    """Top-k search over the indexer's collection.

    An absent collection or zero matches triggers one ingest of the active
    repository; the search itself is not repeated.
    """

    def __init__(
        self,
        embedder: Embedder,
        index: VectorIndex,
        indexer: Indexer,
        top_k: int = DEFAULT_TOP_K,
    ):
        self.embedder = embedder
        self.index = index
        self.indexer = indexer
        self.top_k = top_k

    @property
    def collection(self) -> str:
        return self.indexer.collection

    def _reindex(self) -> tuple[IngestSummary | None, str | None]:
        t0 = time.monotonic()
        try:
            summary = self.indexer.ingest()
        except CodeDocError as e:
            logger.error("rag.search: re-index failed: %s", e)
            return None, str(e)
        logger.info("rag.search: re-index finished (%.1fs)", time.monotonic() - t0)
        return summary, None

    def search(self, query: str) -> SearchOutcome:
        """Embed query and return the top matches, or re-index once and ask for a retry."""
        if not query or not query.strip():
            raise ValueError("Search query must not be empty")

        self.index.ensure_collection(self.collection)
        vector = self.embedder.embed(query)

        try:
            matches = self.index.search(self.collection, vector, self.top_k)
        except CollectionNotFoundError:
            logger.warning("rag.search: collection '%s' missing, ingesting active repo", self.collection)
            summary, error = self._reindex()
            if summary is None:
                message = f"Collection was missing and auto-ingest failed: {error}"
            else:
                message = MISSING_REINDEXED_PREFIX + summary.describe()
            return SearchOutcome(SearchStatus.REINDEXED_MISSING, message, ingest=summary, ingest_error=error)

        if not matches:
            logger.warning("rag.search: no matches in '%s', ingesting active repo", self.collection)
            summary, error = self._reindex()
            if summary is None:
                message = f"No results found and re-indexing failed: {error}"
            else:
                message = EMPTY_REINDEXED_MESSAGE
            return SearchOutcome(SearchStatus.REINDEXED_EMPTY, message, ingest=summary, ingest_error=error)

        logger.info("rag.search: returned %d results for query", len(matches))
        return SearchOutcome(SearchStatus.FOUND, format_matches(matches), matches=matches)
