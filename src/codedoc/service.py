"""The two entry points exposed to agents and the CLI: ingest a codebase, search it.

Both return human-readable strings and report codedoc errors instead of raising them.
"""

import logging

from codedoc.config.settings import Settings
from codedoc.errors import CodeDocError, EmbeddingServiceError, VectorIndexError
from codedoc.rag.embeddings import SentenceTransformerEmbedder
from codedoc.rag.indexer import Indexer
from codedoc.rag.search import Searcher
from codedoc.rag.store import ChromaVectorIndex
from codedoc.repository import RepositoryContext

logger = logging.getLogger(__name__)


class CodeDocService:
    """Indexer and Searcher bound to one session's RepositoryContext."""

    def __init__(self, indexer: Indexer, searcher: Searcher, context: RepositoryContext):
        self.indexer = indexer
        self.searcher = searcher
        self.context = context

    def ingest_codebase(self, path: str | None = None) -> str:
        """Ingest path (or the active repository). Returns a summary or the error."""
        try:
            summary = self.indexer.ingest(path)
        except CodeDocError as e:
            logger.warning("ingest_codebase: %s", e)
            if e.progress is not None:
                return (
                    f"Ingestion aborted: {e}. Progress before failure: "
                    f"{e.progress.files_processed} files, {e.progress.chunks_upserted} chunks."
                )
            if isinstance(e, (EmbeddingServiceError, VectorIndexError)):
                return f"Ingestion aborted: {e}"
            return str(e)
        return summary.describe()

    def search_code_docs(self, query: str) -> str:
        """Bullet list of matching chunks, or a notice that the index was rebuilt."""
        if not query or not query.strip():
            return "Provide a query to search."
        try:
            outcome = self.searcher.search(query)
        except CodeDocError as e:
            logger.warning("search_code_docs: %s", e)
            return f"Search failed: {e}"
        return outcome.message


def build_service(settings: Settings, context: RepositoryContext | None = None) -> CodeDocService:
    """Wire sentence-transformers + ChromaDB from settings.

    The indexer re-ingests whenever the context selects another repository.
    """
    if context is None:
        context = RepositoryContext(settings.codedoc_repo_path or None)
    embedder = SentenceTransformerEmbedder(settings.codedoc_embedding_model)
    index = ChromaVectorIndex(settings.index_dir())
    indexer = Indexer(
        embedder,
        index,
        context=context,
        collection=settings.codedoc_collection,
        max_tokens=settings.codedoc_chunk_tokens,
        extensions=settings.file_extensions(),
    )
    indexer.watch(context)
    searcher = Searcher(embedder, index, indexer, top_k=settings.codedoc_top_k)
    logger.info(
        "build_service: collection=%s index_dir=%s model=%s",
        settings.codedoc_collection, index.index_dir, settings.codedoc_embedding_model,
    )
    return CodeDocService(indexer, searcher, context)
