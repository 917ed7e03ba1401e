"""Test doubles shared across test modules."""

import threading

from codedoc.errors import EmbeddingServiceError, VectorIndexError
from codedoc.rag.embeddings import HashingEmbedder
from codedoc.rag.indexer import Indexer
from codedoc.rag.store import InMemoryVectorIndex

TXT = (".txt",)


class CountingIndexer(Indexer):
    """Indexer that records how often ingest() runs."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.ingest_calls = 0

    def ingest(self, root_path=None, cancel=None):
        self.ingest_calls += 1
        return super().ingest(root_path, cancel)


class FailingEmbedder:
    """Embeds normally for fail_after calls, then raises EmbeddingServiceError."""

    def __init__(self, fail_after: int):
        self.fail_after = fail_after
        self.calls = 0
        self._inner = HashingEmbedder()

    def embed(self, text: str) -> list[float]:
        self.calls += 1
        if self.calls > self.fail_after:
            raise EmbeddingServiceError("provider unreachable")
        return self._inner.embed(text)


class BlockingEmbedder:
    """Blocks every embed() until release is set; started is set on the first call."""

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()
        self._inner = HashingEmbedder()

    def embed(self, text: str) -> list[float]:
        self.started.set()
        self.release.wait(timeout=5)
        return self._inner.embed(text)


class RecordingIndex(InMemoryVectorIndex):
    """Appends its tag to a shared log on every upsert."""

    def __init__(self, tag: str, log: list[str]):
        super().__init__()
        self.tag = tag
        self.log = log

    def upsert(self, name, key, text, vector):
        self.log.append(self.tag)
        super().upsert(name, key, text, vector)


class FailingIndex(InMemoryVectorIndex):
    """Raises VectorIndexError on upserts after the first fail_after."""

    def __init__(self, fail_after: int):
        super().__init__()
        self.fail_after = fail_after
        self.upserts = 0

    def upsert(self, name, key, text, vector):
        self.upserts += 1
        if self.upserts > self.fail_after:
            raise VectorIndexError("store unavailable")
        super().upsert(name, key, text, vector)
