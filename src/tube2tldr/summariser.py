"""
Summarisation capability backed by the OpenAI API.

The pipeline only relies on the small capability interface defined here: an
availability probe, and sessions created from summary options that turn one
text into one summary and are destroyed afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol

import tiktoken
from openai import OpenAI, OpenAIError

from tube2tldr.config import Settings
from tube2tldr.errors import InvalidInputError, SummarizationCallError
from tube2tldr.prompts import (
    FORMAT_INSTRUCTIONS,
    LENGTH_INSTRUCTIONS,
    SUMMARY_SYSTEM_MESSAGE,
    SUMMARY_USER_MESSAGE_TEMPLATE,
    TYPE_INSTRUCTIONS,
)

SUMMARY_TYPES = ("tl;dr", "key-points", "teaser", "headline")
SUMMARY_FORMATS = ("plain-text", "markdown")
SUMMARY_LENGTHS = ("short", "medium", "long")

# gpt-5-nano, USD
INPUT_PRICE_PER_MILLION = 0.05
OUTPUT_PRICE_PER_MILLION = 0.40

DownloadProgressFn = Callable[[int, int], None]


class Availability(Enum):
    READILY = "readily"
    AFTER_DOWNLOAD = "after-download"
    NO = "no"


@dataclass(frozen=True)
class SummaryOptions:
    """Options forwarded to the capability; not interpreted by the pipeline."""

    type: str = "key-points"
    format: str = "markdown"
    length: str = "medium"

    def __post_init__(self):
        if self.type not in SUMMARY_TYPES:
            raise InvalidInputError(f"Unknown summary type {self.type!r}")
        if self.format not in SUMMARY_FORMATS:
            raise InvalidInputError(f"Unknown summary format {self.format!r}")
        if self.length not in SUMMARY_LENGTHS:
            raise InvalidInputError(f"Unknown summary length {self.length!r}")

    @classmethod
    def from_settings(cls, settings: Settings) -> "SummaryOptions":
        return cls(
            type=settings.summary_type,
            format=settings.summary_format,
            length=settings.summary_length,
        )


class SummarizerSession(Protocol):
    def summarize(self, text: str) -> str: ...

    def destroy(self) -> None: ...


class SummarizerCapability(Protocol):
    def availability(self) -> Availability: ...

    def create(
        self,
        options: SummaryOptions,
        on_download_progress: Optional[DownloadProgressFn] = None,
    ) -> SummarizerSession: ...


def build_messages(text: str, options: SummaryOptions) -> List[Dict[str, str]]:
    system_message = SUMMARY_SYSTEM_MESSAGE.format(
        type_instruction=TYPE_INSTRUCTIONS[options.type],
        length_instruction=LENGTH_INSTRUCTIONS[options.type][options.length],
        format_instruction=FORMAT_INSTRUCTIONS[options.format],
    )
    return [
        {"role": "system", "content": system_message},
        {"role": "user", "content": SUMMARY_USER_MESSAGE_TEMPLATE.format(text=text)},
    ]


class OpenAISummarySession:
    """One summarisation session. Not reusable after destroy()."""

    def __init__(self, summariser: "OpenAISummariser", options: SummaryOptions):
        self.summariser = summariser
        self.options = options
        self._destroyed = False

    def summarize(self, text: str) -> str:
        if self._destroyed:
            raise SummarizationCallError("Summarisation session has already been destroyed")
        if not text or not text.strip():
            raise InvalidInputError("Text to summarise cannot be empty")

        summariser = self.summariser
        messages = build_messages(text, self.options)

        estimated_tokens = summariser.count_tokens(text)
        if estimated_tokens > summariser.settings.token_ceiling:
            print(
                f"    Warning: chunk is ~{estimated_tokens:,} tokens, above the "
                f"{summariser.settings.token_ceiling:,} token ceiling"
            )

        try:
            response = summariser.client.chat.completions.create(
                model=summariser.model,
                messages=messages,
            )
        except OpenAIError as e:
            raise SummarizationCallError(f"OpenAI summarisation request failed: {e}") from e

        # Record actual token usage
        if hasattr(response, "usage") and response.usage:
            input_tokens = getattr(response.usage, "prompt_tokens", estimated_tokens)
            output_tokens = getattr(response.usage, "completion_tokens", 0)
        else:
            # Fallback to estimate if usage info not available
            input_tokens = estimated_tokens
            output_tokens = 0
        summariser.record_usage(input_tokens, output_tokens)
        if summariser.verbose:
            print(f"    API call completed ({input_tokens:,} input, {output_tokens:,} output tokens)")

        content = response.choices[0].message.content or ""
        return content.strip()

    def destroy(self) -> None:
        self._destroyed = True


class OpenAISummariser:
    """Summarisation capability using the OpenAI chat completions API."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[OpenAI] = None,
        token_counter: Optional[Callable[[str], int]] = None,
    ):
        """
        Args:
            settings: Application settings (API key, model, timeout, verbosity)
            client: Pre-built OpenAI client, mostly useful for tests
            token_counter: Token counting function; defaults to tiktoken
        """
        self.settings = settings or Settings()
        self.model = self.settings.model
        self.verbose = self.settings.verbose
        self._client = client
        self._token_counter = token_counter
        self._tokenizer = None

        # Token usage tracking
        self.total_input_tokens = 0
        self.total_output_tokens = 0

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(
                api_key=self.settings.require_api_key(),
                timeout=self.settings.openai_timeout,
            )
        return self._client

    def availability(self) -> Availability:
        if self._client is None and not self.settings.openai_api_key:
            return Availability.NO
        return Availability.READILY

    def create(
        self,
        options: SummaryOptions,
        on_download_progress: Optional[DownloadProgressFn] = None,
    ) -> OpenAISummarySession:
        # Nothing to download for a hosted model; on_download_progress is never called.
        return OpenAISummarySession(self, options)

    def count_tokens(self, text: str) -> int:
        if self._token_counter is not None:
            return self._token_counter(text)
        if self._tokenizer is None:
            try:
                self._tokenizer = tiktoken.encoding_for_model(self.model)
            except KeyError:
                # Newer models share the gpt-4 encoding
                self._tokenizer = tiktoken.get_encoding("cl100k_base")
        return len(self._tokenizer.encode(text))

    def record_usage(self, input_tokens: int, output_tokens: int) -> None:
        self.total_input_tokens += input_tokens
        self.total_output_tokens += output_tokens

    def usage_summary(self) -> Dict[str, Any]:
        """
        Token totals and their cost so far.

        Pricing: $0.05 per million input tokens, $0.40 per million output tokens
        """
        input_cost = (self.total_input_tokens / 1_000_000) * INPUT_PRICE_PER_MILLION
        output_cost = (self.total_output_tokens / 1_000_000) * OUTPUT_PRICE_PER_MILLION
        return {
            "input_tokens": self.total_input_tokens,
            "output_tokens": self.total_output_tokens,
            "input_cost": input_cost,
            "output_cost": output_cost,
            "total_cost": input_cost + output_cost,
        }

    def print_usage_summary(self) -> None:
        usage = self.usage_summary()
        print(f"\n  Token Usage Summary:")
        print(f"    Input tokens: {usage['input_tokens']:,} (${usage['input_cost']:.6f})")
        print(f"    Output tokens: {usage['output_tokens']:,} (${usage['output_cost']:.6f})")
        print(f"    Total cost: ${usage['total_cost']:.6f}")
