"""Split source text into size-bounded, line-aligned chunks for indexing."""

import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

DEFAULT_MAX_TOKENS = 400

# Dir names to skip when walking
SKIP_DIRS = frozenset(
    {"node_modules", "__pycache__", ".git", "build", "dist", ".next", "venv", ".venv", "bin", "obj"}
)
_WHITESPACE_SPLIT = re.compile(r"(\s+)")

TokenCounter = Callable[[str], int]


@dataclass(frozen=True)
class Chunk:
    """A contiguous slice of a file with its 1-based line span."""

    text: str
    start_line: int
    end_line: int


def estimate_tokens(text: str) -> int:
    """Token-equivalents of text: one token per four characters."""
    return len(text) // 4


def should_index_path(file_path: Path, extensions: Iterable[str]) -> bool:
    """Return True if the file matches the extension filter and is not under a skipped dir."""
    if any(part in SKIP_DIRS for part in file_path.parts):
        return False
    return file_path.suffix.lower() in {e.lower() for e in extensions}


def _fit_prefix(word: str, max_tokens: int, token_counter: TokenCounter) -> int:
    """Length of the longest prefix of word within max_tokens (at least 1)."""
    lo, hi = 1, len(word)
    while lo < hi:
        mid = (lo + hi + 1) // 2
        if token_counter(word[:mid]) <= max_tokens:
            lo = mid
        else:
            hi = mid - 1
    return lo


def _split_long_line(line: str, max_tokens: int, token_counter: TokenCounter) -> Iterator[str]:
    """Split one over-budget line at whitespace; hard-cut runs with no whitespace."""
    current = ""
    for part in _WHITESPACE_SPLIT.split(line):
        if not part:
            continue
        if token_counter(current + part) <= max_tokens:
            current += part
            continue
        if current:
            yield current
            current = ""
        while token_counter(part) > max_tokens:
            cut = _fit_prefix(part, max_tokens, token_counter)
            yield part[:cut]
            part = part[cut:]
        current = part
    if current:
        yield current


def chunk_lines(
    text: str,
    max_tokens: int = DEFAULT_MAX_TOKENS,
    token_counter: TokenCounter = estimate_tokens,
) -> Iterator[Chunk]:
    """Lazily pack consecutive lines into chunks of at most max_tokens.

    Lines are joined with "\\n" and never split, except a single line that is
    over budget on its own: it is emitted as whitespace-split pieces. Chunks
    that are whitespace-only are dropped.
    """
    if max_tokens < 1:
        raise ValueError(f"max_tokens must be >= 1, got {max_tokens}")
    if not text or not text.strip():
        return

    lines = text.replace("\r\n", "\n").split("\n")
    if lines[-1] == "":
        lines.pop()

    buf: list[str] = []
    buf_start = 1

    def flush(end_line: int) -> Iterator[Chunk]:
        block = "\n".join(buf)
        if block.strip():
            yield Chunk(text=block, start_line=buf_start, end_line=end_line)

    for lineno, line in enumerate(lines, start=1):
        if token_counter(line) > max_tokens:
            if buf:
                yield from flush(lineno - 1)
                buf = []
            for piece in _split_long_line(line, max_tokens, token_counter):
                if piece.strip():
                    yield Chunk(text=piece, start_line=lineno, end_line=lineno)
            continue
        if buf and token_counter("\n".join([*buf, line])) > max_tokens:
            yield from flush(lineno - 1)
            buf = []
        if not buf:
            buf_start = lineno
        buf.append(line)

    if buf:
        yield from flush(len(lines))
