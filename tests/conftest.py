"""Shared fixtures: offline embedder, in-memory index, small source trees."""

import pytest

from codedoc.rag.embeddings import HashingEmbedder
from codedoc.rag.search import Searcher
from codedoc.rag.store import InMemoryVectorIndex
from codedoc.repository import RepositoryContext
from codedoc.service import CodeDocService
from tests.helpers import TXT, CountingIndexer


@pytest.fixture
def embedder():
    return HashingEmbedder()


@pytest.fixture
def index():
    return InMemoryVectorIndex()


@pytest.fixture
def repo(tmp_path):
    """a.txt: 3 short lines (1 chunk). b.txt: 90 lines of 10 tokens each (3 chunks at 400)."""
    root = tmp_path / "repo"
    root.mkdir()
    (root / "a.txt").write_text("alpha line\nbeta line\nUNIQUE_MARKER_42 gamma\n", encoding="utf-8")
    (root / "b.txt").write_text("".join(f"{i:03d}" + "x" * 36 + "\n" for i in range(90)), encoding="utf-8")
    (root / "ignored.bin").write_text("not matched by the extension filter", encoding="utf-8")
    return root


@pytest.fixture
def context(repo):
    return RepositoryContext(repo)


@pytest.fixture
def indexer(embedder, index, context):
    return CountingIndexer(embedder, index, context=context, extensions=TXT)


@pytest.fixture
def searcher(embedder, index, indexer):
    return Searcher(embedder, index, indexer)


@pytest.fixture
def service(indexer, searcher, context):
    return CodeDocService(indexer, searcher, context)
