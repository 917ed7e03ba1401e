"""Agent tools for ingesting and semantically searching a codebase."""

import logging
from typing import Type

from crewai.tools import BaseTool
from pydantic import BaseModel, Field

from codedoc.service import CodeDocService

logger = logging.getLogger(__name__)


class IngestCodebaseInput(BaseModel):
    """Input for IngestCodebaseTool."""

    path: str = Field(
        default="",
        description="Directory to ingest. Leave empty to ingest the currently selected repository.",
    )


class IngestCodebaseTool(BaseTool):
    """Index a source tree for semantic search."""

    name: str = "Ingest Codebase"
    description: str = (
        "Chunk, embed and store every source file under a directory so it can be searched. "
        "Leave path empty to use the currently selected repository. "
        "Returns the number of files and chunks ingested, or an error description."
    )
    args_schema: Type[BaseModel] = IngestCodebaseInput

    def __init__(self, service: CodeDocService, **kwargs):
        super().__init__(**kwargs)
        self._service = service

    def _run(self, path: str = "") -> str:
        logger.info("IngestCodebaseTool: path=%s", path or "<active repo>")
        return self._service.ingest_codebase(path.strip() or None)


class SearchCodeDocsInput(BaseModel):
    """Input for SearchCodeDocsTool."""

    query: str = Field(description="What to look for (e.g. a class name, feature, or behavior).")


class SearchCodeDocsTool(BaseTool):
    """Search indexed code by semantic similarity."""

    name: str = "Search Code Docs"
    description: str = (
        "RAG semantic search over the ingested codebase. Returns the most relevant code chunks as a bullet list. "
        "If the index was empty or missing it is rebuilt and you are asked to search again."
    )
    args_schema: Type[BaseModel] = SearchCodeDocsInput

    def __init__(self, service: CodeDocService, **kwargs):
        super().__init__(**kwargs)
        self._service = service

    def _run(self, query: str) -> str:
        logger.info("SearchCodeDocsTool: query_len=%d", len(query))
        return self._service.search_code_docs(query)


def create_code_doc_tools(service: CodeDocService) -> list[BaseTool]:
    """Both code-doc tools bound to one service."""
    return [IngestCodebaseTool(service=service), SearchCodeDocsTool(service=service)]
