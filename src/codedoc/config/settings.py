"""Pydantic settings for codedoc configuration."""

import logging
import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Name of the single active vector collection.
    codedoc_collection: str = "code-docs"

    # Max token-equivalents (chars / 4) per chunk.
    codedoc_chunk_tokens: int = Field(default=400, ge=1)

    # Matches requested per search.
    codedoc_top_k: int = Field(default=5, ge=1)

    # Comma-separated extension filter for ingestion (e.g. ".cs,.py,.ts").
    codedoc_extensions: str = ".cs,.py"

    # ChromaDB persistence directory. Default: .codedoc_index in cwd.
    codedoc_index_dir: str = ""

    # sentence-transformers model ID used for chunk and query embeddings.
    codedoc_embedding_model: str = "all-MiniLM-L6-v2"

    # Log level name for configure_logging (DEBUG shows one line per upserted chunk).
    codedoc_log_level: str = "INFO"

    # Repository selected at startup; can be changed at runtime via RepositoryContext.select().
    codedoc_repo_path: str = ""

    def file_extensions(self) -> tuple[str, ...]:
        """Normalized extension filter: lower-case, leading dot, no blanks."""
        exts = []
        for raw in self.codedoc_extensions.split(","):
            ext = raw.strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = f".{ext}"
            exts.append(ext)
        if not exts:
            logger.warning("Settings: CODEDOC_EXTENSIONS is empty, nothing will be ingested")
        return tuple(exts)

    def index_dir(self) -> Path:
        """ChromaDB directory (created on first use by the client)."""
        raw = self.codedoc_index_dir.strip()
        if raw:
            return Path(raw).expanduser().resolve()
        return Path.cwd().resolve() / ".codedoc_index"


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()


settings = get_settings()
