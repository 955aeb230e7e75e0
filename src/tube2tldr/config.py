"""Configuration management and environment variable loading."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

from dotenv import load_dotenv

from tube2tldr.errors import InvalidInputError


SETTLE_STRATEGIES = ("fixed", "poll")


@dataclass(frozen=True)
class PageSelectors:
    """Tag names, ids and labels of the YouTube watch page controls."""

    transcript_button_label: str = "Show transcript"
    chat_container_id: str = "chat-container"
    expand_button_tag: str = "tp-yt-paper-button"
    expand_button_text: str = "...more"
    engagement_panel_tag: str = "ytd-engagement-panel-section-list-renderer"
    entry_tag: str = "ytd-transcript-segment-renderer"
    timestamp_tag: str = "div"
    timestamp_class: str = "segment-timestamp"
    text_tag: str = "yt-formatted-string"


@dataclass(frozen=True)
class Settings:
    """Application configuration, passed explicitly to each component."""

    openai_api_key: str = ""
    model: str = "gpt-5-nano"
    openai_timeout: float = 60.0

    # ~700 words stays under a 1024 token inference ceiling
    max_words_per_chunk: int = 700
    token_ceiling: int = 1024
    max_levels: int = 8

    max_empty_lines: int = 5
    settle_seconds: float = 1.0
    settle_strategy: str = "fixed"
    stable_polls: int = 2
    max_settle_polls: int = 10

    debounce_seconds: float = 1.0

    summary_type: str = "key-points"
    summary_format: str = "markdown"
    summary_length: str = "medium"

    headless: bool = True
    verbose: bool = False
    selectors: PageSelectors = field(default_factory=PageSelectors)

    def __post_init__(self):
        if self.max_words_per_chunk < 1:
            raise InvalidInputError("max_words_per_chunk must be a positive integer")
        if self.max_levels < 1:
            raise InvalidInputError("max_levels must be at least 1")
        if self.max_empty_lines < 0:
            raise InvalidInputError("max_empty_lines cannot be negative")
        if self.settle_seconds < 0 or self.debounce_seconds < 0:
            raise InvalidInputError("wait intervals cannot be negative")
        if self.settle_strategy not in SETTLE_STRATEGIES:
            raise InvalidInputError(
                f"settle_strategy must be one of {', '.join(SETTLE_STRATEGIES)}, "
                f"got {self.settle_strategy!r}"
            )

    @classmethod
    def from_env(cls, **overrides) -> "Settings":
        """
        Build settings from the environment (and a .env file, if present).

        Keyword overrides win over environment values, e.g. ``verbose=True``
        from the command line.
        """
        # Don't override variables that are already exported
        load_dotenv(override=False)

        settings = cls(
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            model=os.getenv("OPENAI_MODEL", cls.model),
            openai_timeout=_env_float("OPENAI_TIMEOUT", cls.openai_timeout),
            max_words_per_chunk=_env_int("TUBE2TLDR_MAX_WORDS", cls.max_words_per_chunk),
            token_ceiling=_env_int("TUBE2TLDR_TOKEN_CEILING", cls.token_ceiling),
            max_levels=_env_int("TUBE2TLDR_MAX_LEVELS", cls.max_levels),
            settle_seconds=_env_float("TUBE2TLDR_SETTLE_SECONDS", cls.settle_seconds),
            settle_strategy=os.getenv("TUBE2TLDR_SETTLE_STRATEGY", cls.settle_strategy),
            debounce_seconds=_env_float("TUBE2TLDR_DEBOUNCE_SECONDS", cls.debounce_seconds),
            summary_type=os.getenv("TUBE2TLDR_SUMMARY_TYPE", cls.summary_type),
            summary_format=os.getenv("TUBE2TLDR_SUMMARY_FORMAT", cls.summary_format),
            summary_length=os.getenv("TUBE2TLDR_SUMMARY_LENGTH", cls.summary_length),
            headless=_env_bool("TUBE2TLDR_HEADLESS", cls.headless),
        )
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(settings, **overrides) if overrides else settings

    def require_api_key(self) -> str:
        """Return the OpenAI API key or fail with a readable message."""
        if not self.openai_api_key:
            raise InvalidInputError(
                "OpenAI API key required. Set OPENAI_API_KEY environment variable "
                "or add it to your .env file."
            )
        return self.openai_api_key


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidInputError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise InvalidInputError(f"{name} must be a number, got {raw!r}") from None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")
