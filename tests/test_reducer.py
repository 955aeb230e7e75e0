"""Tests for the hierarchical summarisation reducer."""

import pytest

from tube2tldr.chunk import count_words
from tube2tldr.errors import (
    InvalidInputError,
    SummarizationCallError,
    SummarizationCancelled,
)
from tube2tldr.reducer import CancellationToken, SummarizationReducer


def ten_word_sentences(n):
    return " ".join(f"Sentence {i} has exactly ten words in it for testing." for i in range(n))


class RecordingSummarizer:
    """Returns a short numbered summary and remembers every input."""

    def __init__(self, suffix=""):
        self.inputs = []
        self.suffix = suffix

    def __call__(self, text):
        self.inputs.append(text)
        return f"Summary {len(self.inputs)}{self.suffix}"


def test_single_chunk_is_one_level():
    summarize = RecordingSummarizer()
    reducer = SummarizationReducer(max_words_per_chunk=700)

    result = reducer.reduce_levels("Just one short text. Nothing more", summarize)

    assert summarize.inputs == ["Just one short text. Nothing more."]
    assert len(result.levels) == 1
    assert result.final == "Summary 1."


def test_fifteen_hundred_words_reduce_in_two_levels():
    text = ten_word_sentences(150)
    assert count_words(text) == 1500
    summarize = RecordingSummarizer()
    reducer = SummarizationReducer(max_words_per_chunk=700)

    result = reducer.reduce_levels(text, summarize)

    assert len(summarize.inputs) == 4
    assert [count_words(t) for t in summarize.inputs[:3]] == [700, 700, 100]
    assert summarize.inputs[3] == "Summary 1. Summary 2. Summary 3."
    assert [len(level) for level in result.levels] == [3, 1]
    assert result.first_level == "Summary 1. Summary 2. Summary 3."
    assert result.final == "Summary 4."


def test_summaries_get_sentence_punctuation():
    reducer = SummarizationReducer(max_words_per_chunk=5)
    result = reducer.reduce_levels("a b c. d e f!", lambda text: "done?")
    assert result.levels[0][0].summary_text == "done?"


def test_keeps_reducing_while_summaries_do_not_fit():
    # Summaries as long as their input never shrink: reduction stops at max_levels.
    reducer = SummarizationReducer(max_words_per_chunk=3, max_levels=3)
    statuses = []

    result = reducer.reduce_levels("a b c. d e f. g h i.", lambda text: text, status_fn=statuses.append)

    assert len(result.levels) == 3
    assert any("stopped after 3" in s for s in statuses)


def test_recursive_reduction_beyond_two_levels():
    calls = []

    def summarize(text):
        calls.append(text)
        # Halve the word count of each chunk
        words = text.rstrip(".").split()
        return " ".join(words[: max(1, len(words) // 2)])

    reducer = SummarizationReducer(max_words_per_chunk=4)
    text = " ".join(f"w{i}" for i in range(32)) + "."

    result = reducer.reduce_levels(text, summarize)

    assert len(result.levels) > 2
    assert len(result.levels[-1]) == 1
    assert all(len(level) > 1 for level in result.levels[:-1])


def test_status_and_level_callbacks():
    statuses, levels = [], []
    reducer = SummarizationReducer(max_words_per_chunk=10)

    reducer.reduce(
        ten_word_sentences(2),
        RecordingSummarizer(),
        status_fn=statuses.append,
        on_level=lambda level, text: levels.append((level, text)),
    )

    # before and after each of the 2 + 1 chunks
    assert len(statuses) == 6
    assert statuses[0].startswith("Level 1: summarising chunk 1/2")
    assert levels == [(1, "Summary 1. Summary 2."), (2, "Summary 3.")]


def test_failing_chunk_aborts_the_run():
    calls = []

    def summarize(text):
        calls.append(text)
        if len(calls) == 2:
            raise RuntimeError("model crashed")
        return "ok"

    reducer = SummarizationReducer(max_words_per_chunk=10)
    with pytest.raises(SummarizationCallError, match="chunk 2/3"):
        reducer.reduce(ten_word_sentences(3), summarize)
    assert len(calls) == 2


def test_blank_summary_is_an_error():
    reducer = SummarizationReducer(max_words_per_chunk=10)
    with pytest.raises(SummarizationCallError):
        reducer.reduce("Some text.", lambda text: "   ")


def test_cancellation_is_honoured_between_chunks():
    token = CancellationToken()
    calls = []

    def summarize(text):
        calls.append(text)
        token.cancel()
        return "ok"

    reducer = SummarizationReducer(max_words_per_chunk=10)
    with pytest.raises(SummarizationCancelled):
        reducer.reduce(ten_word_sentences(3), summarize, cancel=token)
    assert len(calls) == 1


def test_blank_text_is_rejected():
    with pytest.raises(InvalidInputError):
        SummarizationReducer().reduce("  ", lambda text: "x")


def test_bad_budget_is_rejected():
    with pytest.raises(InvalidInputError):
        SummarizationReducer(max_words_per_chunk=0)
