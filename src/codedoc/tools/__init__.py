"""codedoc agent tools – ingest and search a codebase.

IngestCodebaseTool, SearchCodeDocsTool (crewai), built together by create_code_doc_tools.
"""

from codedoc.tools.code_doc_tools import (
    IngestCodebaseTool,
    SearchCodeDocsTool,
    create_code_doc_tools,
)

__all__ = [
    "IngestCodebaseTool",
    "SearchCodeDocsTool",
    "create_code_doc_tools",
]
