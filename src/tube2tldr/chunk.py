"""
Text chunker (sentence-aware, word budget).

Input: a flat text, e.g. a flattened transcript or a concatenation of
summaries.

Output: an ordered list of chunks, each holding at most ``max_words_per_chunk``
words. Chunks are built from whole sentences where possible; only a sentence
that is longer than the budget on its own is cut into word groups.

Words are never altered, dropped or reordered: joining the chunks gives back
the input's words in order.
"""

from __future__ import annotations

import math
import re
from typing import List

from tube2tldr.errors import InvalidInputError

# Tuned for a 1024 token inference ceiling (rough words-to-tokens ratio).
DEFAULT_MAX_WORDS_PER_CHUNK = 700

# Soft boundary: whitespace after sentence-ending punctuation
_SENTENCE_SPLIT_RE = re.compile(r"(?<=[.!?])\s+")


# ----------------------------
# Utilities
# ----------------------------

def format_ts(seconds: float) -> str:
    seconds = max(0, int(seconds))
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


def simple_token_count(text: str) -> int:
    """
    Approximate token count without external dependencies.
    """
    parts = re.findall(r"\w+|[^\w\s]", text, flags=re.UNICODE)
    return len(parts)


def count_words(text: str) -> int:
    return len(text.split())


def is_sentence_boundary(text: str) -> bool:
    text = text.strip()
    return bool(text) and text[-1] in ".!?…"


def ensure_sentence_end(text: str) -> str:
    """Append a period unless the text already ends a sentence."""
    text = text.strip()
    if not text or is_sentence_boundary(text):
        return text
    return text + "."


def split_sentences(text: str) -> List[str]:
    """Split text into sentence-like segments, keeping trailing punctuation."""
    return [s.strip() for s in _SENTENCE_SPLIT_RE.split(text.strip()) if s.strip()]


def split_words_evenly(words: List[str], max_words: int) -> List[List[str]]:
    """
    Cut an over-long sentence into the fewest groups that fit the budget,
    sized as evenly as possible.
    """
    n_groups = math.ceil(len(words) / max_words)
    group_size = math.ceil(len(words) / n_groups)
    return [words[i:i + group_size] for i in range(0, len(words), group_size)]


# ----------------------------
# Core chunking logic
# ----------------------------

def chunk_text(text: str, max_words_per_chunk: int = DEFAULT_MAX_WORDS_PER_CHUNK) -> List[str]:
    """
    Split ``text`` into chunks of at most ``max_words_per_chunk`` words.

    Sentences are packed greedily: a chunk is closed as soon as the next
    sentence would push it over the budget. A sentence that alone exceeds the
    budget closes the current chunk and is split into evenly sized word groups,
    each becoming a chunk of its own.

    Raises InvalidInputError for blank text or a budget that is not a positive
    integer. Text without any words gives an empty list.
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidInputError("Text to chunk cannot be empty")
    if (
        isinstance(max_words_per_chunk, bool)
        or not isinstance(max_words_per_chunk, int)
        or max_words_per_chunk < 1
    ):
        raise InvalidInputError(
            f"max_words_per_chunk must be a positive integer, got {max_words_per_chunk!r}"
        )

    chunks: List[str] = []
    current: List[str] = []

    def close_current() -> None:
        if current:
            chunks.append(" ".join(current))
            current.clear()

    for sentence in split_sentences(text):
        words = sentence.split()
        if not words:
            continue

        if len(words) > max_words_per_chunk:
            # Last resort: sub-sentence split
            close_current()
            for group in split_words_evenly(words, max_words_per_chunk):
                chunks.append(" ".join(group))
            continue

        if len(current) + len(words) > max_words_per_chunk:
            close_current()
        current.extend(words)

    close_current()
    return chunks


# ----------------------------
# Example
# ----------------------------

if __name__ == "__main__":
    demo = (
        "Welcome to the show. Today we're talking about pricing. "
        "Anyway, I think the first key point is segmentation! "
        "If you bundle features wrong, you confuse willingness to pay. "
        "To summarize, you need a clear hypothesis and a stopping rule?"
    )

    for ndx, c in enumerate(chunk_text(demo, max_words_per_chunk=12)):
        print(f"chunk {ndx} ({count_words(c)} words, ~{simple_token_count(c)} tokens)")
        print(" ", c)
        print()
