"""Tests for the ingest_codebase / search_code_docs entry points."""

from pathlib import Path

from codedoc.rag.embeddings import HashingEmbedder
from codedoc.rag.indexer import Indexer
from codedoc.rag.search import Searcher
from codedoc.rag.store import ChromaVectorIndex
from codedoc.repository import RepositoryContext
from codedoc.service import CodeDocService
from tests.helpers import TXT, FailingEmbedder


def test_ingest_codebase_summary(service, repo):
    """Two files, four chunks."""
    assert service.ingest_codebase(str(repo)) == "Ingested 2 files, total 4 chunks into 'code-docs'."


def test_ingest_codebase_invalid_path_is_reported(service):
    """Missing path is a result string, not an exception."""
    assert service.ingest_codebase("/path/does/not/exist") == "Invalid path: /path/does/not/exist"


def test_ingest_codebase_without_repo_is_reported(embedder, index):
    context = RepositoryContext()
    indexer = Indexer(embedder, index, context=context, extensions=TXT)
    service = CodeDocService(indexer, Searcher(embedder, index, indexer), context)
    assert service.ingest_codebase() == "No path provided and no Git repo selected."


def test_ingest_codebase_embedding_failure_reports_progress(index, context, repo):
    embedder = FailingEmbedder(fail_after=1)
    indexer = Indexer(embedder, index, context=context, extensions=TXT)
    service = CodeDocService(indexer, Searcher(embedder, index, indexer), context)
    result = service.ingest_codebase(str(repo))
    assert result == (
        "Ingestion aborted: provider unreachable. Progress before failure: 1 files, 1 chunks."
    )


def test_search_code_docs_self_heals_then_finds(service, indexer):
    """First search rebuilds the empty index, the retry returns bullets."""
    first = service.search_code_docs("UNIQUE_MARKER_42")
    assert first == "No results found. The repo has now been indexed, try again."
    assert indexer.ingest_calls == 1

    second = service.search_code_docs("UNIQUE_MARKER_42")
    assert second.startswith("- ")
    assert "UNIQUE_MARKER_42" in second
    assert indexer.ingest_calls == 1


def test_search_code_docs_reports_embedding_failure(index, context):
    embedder = FailingEmbedder(fail_after=0)
    indexer = Indexer(embedder, index, context=context, extensions=TXT)
    service = CodeDocService(indexer, Searcher(embedder, index, indexer), context)
    assert service.search_code_docs("x") == "Search failed: provider unreachable"


def test_search_code_docs_blank_query(service, indexer):
    assert service.search_code_docs("  ") == "Provide a query to search."
    assert indexer.ingest_calls == 0


def _chroma_service(index_dir, context, dimensions=256):
    """Service wired like build_service, with an offline embedder."""
    embedder = HashingEmbedder(dimensions)
    index = ChromaVectorIndex(index_dir)
    indexer = Indexer(embedder, index, context=context, extensions=TXT)
    return CodeDocService(indexer, Searcher(embedder, index, indexer), context)


def test_chroma_self_heal_then_round_trip(tmp_path, context):
    """Empty chroma collection: first search rebuilds, the retry finds the marker."""
    service = _chroma_service(tmp_path / "index", context)
    first = service.search_code_docs("UNIQUE_MARKER_42")
    assert first == "No results found. The repo has now been indexed, try again."
    second = service.search_code_docs("UNIQUE_MARKER_42")
    assert second.startswith("- ")
    assert "UNIQUE_MARKER_42" in second


def test_chroma_ingest_is_idempotent(tmp_path, context, repo):
    """Re-ingesting into chroma keeps the same four keys."""
    service = _chroma_service(tmp_path / "index", context)
    assert service.ingest_codebase(str(repo)) == "Ingested 2 files, total 4 chunks into 'code-docs'."
    assert service.ingest_codebase(str(repo)) == "Ingested 2 files, total 4 chunks into 'code-docs'."
    assert service.indexer.index.count("code-docs") == 4


def test_chroma_dimension_change_is_reported(tmp_path, context, repo):
    """Switching embedders on an existing index returns errors instead of raising."""
    index_dir = tmp_path / "index"
    _chroma_service(index_dir, context, dimensions=256).ingest_codebase(str(repo))
    service = _chroma_service(index_dir, context, dimensions=64)

    searched = service.search_code_docs("alpha")
    assert searched.startswith("Search failed: Vector store query on 'code-docs' failed:")

    ingested = service.ingest_codebase(str(repo))
    assert ingested.startswith("Ingestion aborted: Vector store upsert on 'code-docs' failed:")
    assert ingested.endswith("Progress before failure: 0 files, 0 chunks.")


def test_ingest_codebase_unreadable_file_is_reported(service, repo, monkeypatch):
    """An IO error while reading a source file comes back as a message with progress."""
    read_text = Path.read_text

    def failing_read_text(self, *args, **kwargs):
        if self.name == "b.txt":
            raise OSError(5, "Input/output error")
        return read_text(self, *args, **kwargs)

    monkeypatch.setattr(Path, "read_text", failing_read_text)
    result = service.ingest_codebase(str(repo))
    assert result == (
        f"Ingestion aborted: Could not read {repo.resolve() / 'b.txt'}: [Errno 5] Input/output error. "
        "Progress before failure: 1 files, 1 chunks."
    )
