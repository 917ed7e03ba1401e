"""codedoc entry point - CLI for ingesting and searching a codebase."""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from codedoc.logging_config import configure_logging

load_dotenv(os.getenv("ENV_FILE", ".env"))

logger = logging.getLogger(__name__)


def _service(repo: str | None):
    from codedoc.config import get_settings
    from codedoc.repository import RepositoryContext
    from codedoc.service import build_service

    settings = get_settings()
    context = RepositoryContext(repo or settings.codedoc_repo_path or None)
    return build_service(settings, context)


def run_ingest(path: str | None, repo: str | None) -> str:
    """Ingest path, or the active repository when path is omitted."""
    service = _service(repo)
    logger.info("Ingesting %s", path or service.context.active_path or "<no repo selected>")
    return service.ingest_codebase(path)


def run_search(query: str, repo: str | None) -> str:
    """Search the index; rebuilds it from the active repository when empty."""
    service = _service(repo)
    return service.search_code_docs(query)


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="codedoc: semantic indexing and search over a source tree"
    )
    parser.add_argument(
        "--repo",
        default=None,
        help="Active repository path (default: CODEDOC_REPO_PATH)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    ingest_parser = subparsers.add_parser("ingest", help="Chunk, embed and store a source tree")
    ingest_parser.add_argument("path", nargs="?", default=None, help="Directory (default: active repo)")

    search_parser = subparsers.add_parser("search", help="Semantic search over the ingested code")
    search_parser.add_argument("query", help="Search text")

    args = parser.parse_args()

    configure_logging(logging.DEBUG if args.verbose else None)

    if args.command == "ingest":
        print(run_ingest(args.path, args.repo))
    elif args.command == "search":
        print(run_search(args.query, args.repo))
    else:
        logger.debug("No command specified, showing help")
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
