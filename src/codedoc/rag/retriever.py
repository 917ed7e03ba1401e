"""LangChain BaseRetriever wrapping code-doc semantic search."""

import logging
from typing import Any

from langchain_core.documents import Document
from langchain_core.retrievers import BaseRetriever

from codedoc.rag.search import Searcher

logger = logging.getLogger(__name__)


class CodeDocRetriever(BaseRetriever):
    """LangChain retriever over a Searcher.

    Returns Document objects with page_content (chunk text) and metadata
    (key, score). When the search triggered a re-index it returns no
    documents; call again to get results.
    """

    searcher: Searcher
    """Searcher bound to the collection to query."""

    def _get_relevant_documents(self, query: str, **kwargs: Any) -> list[Document]:
        """Retrieve documents relevant to the query."""
        if not query or not query.strip():
            logger.debug("CodeDocRetriever: empty query, returning []")
            return []
        outcome = self.searcher.search(query)
        if outcome.needs_retry:
            logger.info("CodeDocRetriever: %s, returning no documents", outcome.status.value)
            return []
        logger.info("CodeDocRetriever: retrieved %d documents for query", len(outcome.matches))
        return [
            Document(page_content=m.text, metadata={"key": m.key, "score": m.score})
            for m in outcome.matches
        ]
