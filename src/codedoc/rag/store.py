"""Vector index adapters: ChromaDB on disk, numpy in memory."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

import chromadb
import numpy as np
from chromadb.errors import ChromaError, NotFoundError

from codedoc.errors import CollectionNotFoundError, VectorIndexError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchMatch:
    """One search hit: stored record text and similarity (higher is closer)."""

    key: str
    text: str
    score: float


class VectorIndex(Protocol):
    """Named collections of (key, text, vector) records.

    search() raises CollectionNotFoundError for an absent collection and
    returns an empty list for an existing but empty one. Any other store
    failure is raised as VectorIndexError.
    """

    def ensure_collection(self, name: str) -> None: ...

    def upsert(self, name: str, key: str, text: str, vector: Sequence[float]) -> None: ...

    def search(self, name: str, query_vector: Sequence[float], top_k: int) -> list[SearchMatch]: ...

    def count(self, name: str) -> int: ...


@contextmanager
def _chroma_errors(operation: str, name: str) -> Iterator[None]:
    """Re-raise chromadb failures as CollectionNotFoundError / VectorIndexError."""
    try:
        yield
    except NotFoundError as e:
        raise CollectionNotFoundError(name) from e
    except (ChromaError, ValueError) as e:
        raise VectorIndexError(f"Vector store {operation} on '{name}' failed: {e}") from e


class ChromaVectorIndex:
    """ChromaDB-backed index persisted under index_dir (cosine space)."""

    def __init__(self, index_dir: Path | str):
        self.index_dir = Path(index_dir)
        self.index_dir.mkdir(parents=True, exist_ok=True)
        self._client = chromadb.PersistentClient(path=str(self.index_dir))

    def _collection(self, name: str):
        try:
            return self._client.get_collection(name)
        except (NotFoundError, ValueError) as e:
            raise CollectionNotFoundError(name) from e

    def ensure_collection(self, name: str) -> None:
        with _chroma_errors("create", name):
            self._client.get_or_create_collection(name, metadata={"hnsw:space": "cosine"})

    def upsert(self, name: str, key: str, text: str, vector: Sequence[float]) -> None:
        collection = self._collection(name)
        with _chroma_errors("upsert", name):
            collection.upsert(ids=[key], embeddings=[list(vector)], documents=[text])

    def count(self, name: str) -> int:
        collection = self._collection(name)
        with _chroma_errors("count", name):
            return collection.count()

    def search(self, name: str, query_vector: Sequence[float], top_k: int) -> list[SearchMatch]:
        collection = self._collection(name)
        with _chroma_errors("query", name):
            count = collection.count()
            if count == 0:
                logger.debug("store.search: collection %s is empty", name)
                return []
            results = collection.query(
                query_embeddings=[list(query_vector)],
                n_results=min(top_k, count),
                include=["documents", "distances"],
            )
        out: list[SearchMatch] = []
        if not results or not results["ids"]:
            return out
        for key, doc, distance in zip(
            results["ids"][0], results["documents"][0], results["distances"][0]
        ):
            out.append(SearchMatch(key=key, text=doc or "", score=1.0 - float(distance)))
        return out


class InMemoryVectorIndex:
    """Process-local index; cosine similarity over numpy arrays.

    All vectors in a collection must share the dimension of the first one
    upserted. keys() and get() expose stored records for inspection; they are
    not part of VectorIndex.
    """

    def __init__(self):
        self._collections: dict[str, dict[str, tuple[str, np.ndarray]]] = {}

    def _records(self, name: str) -> dict[str, tuple[str, np.ndarray]]:
        if name not in self._collections:
            raise CollectionNotFoundError(name)
        return self._collections[name]

    @staticmethod
    def _check_dimension(name: str, records: dict[str, tuple[str, np.ndarray]], vector: np.ndarray) -> None:
        if not records:
            return
        _, first = next(iter(records.values()))
        if vector.shape != first.shape:
            raise VectorIndexError(
                f"Collection '{name}' expects embedding dimension {first.shape[0]}, got {vector.shape[0]}"
            )

    def ensure_collection(self, name: str) -> None:
        self._collections.setdefault(name, {})

    def upsert(self, name: str, key: str, text: str, vector: Sequence[float]) -> None:
        records = self._records(name)
        arr = np.asarray(vector, dtype=np.float32)
        self._check_dimension(name, records, arr)
        records[key] = (text, arr)

    def count(self, name: str) -> int:
        return len(self._records(name))

    def keys(self, name: str) -> list[str]:
        return list(self._records(name))

    def get(self, name: str, key: str) -> tuple[str, list[float]]:
        text, vector = self._records(name)[key]
        return text, vector.tolist()

    def search(self, name: str, query_vector: Sequence[float], top_k: int) -> list[SearchMatch]:
        records = self._records(name)
        if not records or top_k < 1:
            return []
        query = np.asarray(query_vector, dtype=np.float32)
        self._check_dimension(name, records, query)
        query_norm = np.linalg.norm(query)
        scored = []
        for key, (text, vector) in records.items():
            denom = query_norm * np.linalg.norm(vector)
            score = float(np.dot(query, vector) / denom) if denom > 0 else 0.0
            scored.append(SearchMatch(key=key, text=text, score=score))
        scored.sort(key=lambda m: m.score, reverse=True)
        return scored[:top_k]
