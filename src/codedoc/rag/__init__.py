"""RAG – code indexing and semantic search.

Indexing (indexer.Indexer): walks a tree, chunks each source file into
line-aligned pieces (chunker), embeds them and upserts into one collection
keyed by "{file}#{ordinal}".
Search (search.Searcher): embeds the query, returns top-k chunks, and
re-indexes the active repository once when the collection is empty or missing.
"""

from codedoc.rag.chunker import Chunk, chunk_lines, estimate_tokens, should_index_path

__all__ = [
    "Chunk",
    "chunk_lines",
    "estimate_tokens",
    "should_index_path",
    "Indexer",
    "IngestSummary",
    "Searcher",
    "SearchOutcome",
    "SearchStatus",
    "CodeDocRetriever",
]


def __getattr__(name: str):
    """Lazy import for heavy deps (chromadb, langchain)."""
    if name == "Indexer":
        from codedoc.rag.indexer import Indexer
        return Indexer
    if name == "IngestSummary":
        from codedoc.rag.indexer import IngestSummary
        return IngestSummary
    if name == "Searcher":
        from codedoc.rag.search import Searcher
        return Searcher
    if name == "SearchOutcome":
        from codedoc.rag.search import SearchOutcome
        return SearchOutcome
    if name == "SearchStatus":
        from codedoc.rag.search import SearchStatus
        return SearchStatus
    if name == "CodeDocRetriever":
        from codedoc.rag.retriever import CodeDocRetriever
        return CodeDocRetriever
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
