"""Text embedders: sentence-transformers for real use, hashing for offline runs."""

import hashlib
import logging
import re
import time
from typing import Protocol

import numpy as np

from codedoc.errors import EmbeddingServiceError

logger = logging.getLogger(__name__)
_TOKEN_PATTERN = re.compile(r"\w+")


class Embedder(Protocol):
    """Maps one text to a fixed-length vector. Raises EmbeddingServiceError on failure."""

    def embed(self, text: str) -> list[float]: ...


class SentenceTransformerEmbedder:
    """Embedder backed by a sentence-transformers model, loaded on first use.

    One call per text, no retry. Any failure from the model (load or encode)
    is re-raised as EmbeddingServiceError.
    """

    def __init__(self, model_name: str):
        self.model_name = model_name
        self._model = None

    def _load(self):
        if self._model is None:
            from sentence_transformers import SentenceTransformer

            t0 = time.monotonic()
            try:
                self._model = SentenceTransformer(self.model_name)
            except Exception as e:
                raise EmbeddingServiceError(
                    f"Could not load embedding model {self.model_name}: {e}"
                ) from e
            logger.info("embeddings: loaded model %s (%.1fs)", self.model_name, time.monotonic() - t0)
        return self._model

    def embed(self, text: str) -> list[float]:
        model = self._load()
        try:
            vectors = model.encode([text], show_progress_bar=False)
        except Exception as e:
            raise EmbeddingServiceError(f"Embedding failed ({self.model_name}): {e}") from e
        return vectors[0].tolist()


class HashingEmbedder:
    """Deterministic bag-of-words embedder (feature hashing, L2-normalised).

    No model download; texts that share words get similar vectors.
    """

    def __init__(self, dimensions: int = 256):
        if dimensions < 1:
            raise ValueError(f"dimensions must be >= 1, got {dimensions}")
        self.dimensions = dimensions

    def _bucket(self, token: str) -> int:
        digest = hashlib.blake2b(token.encode("utf-8"), digest_size=8).digest()
        return int.from_bytes(digest, "big") % self.dimensions

    def embed(self, text: str) -> list[float]:
        vector = np.zeros(self.dimensions, dtype=np.float32)
        for token in _TOKEN_PATTERN.findall(text.lower()):
            vector[self._bucket(token)] += 1.0
        norm = np.linalg.norm(vector)
        if norm > 0:
            vector /= norm
        return vector.tolist()
