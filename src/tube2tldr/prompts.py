"""
LLM prompts used throughout the application.

All prompts are centralized here for easy maintenance and consistency.
"""

# ============================================================================
# Chunk Summary Prompts
# ============================================================================

SUMMARY_SYSTEM_MESSAGE = """You are a summarization assistant specialized in video transcripts. You summarize only what the text says.

Guidelines:
- Use ONLY information from the provided text
- Do not add external knowledge, opinions or assumptions
- The text may be a raw caption transcript without punctuation, or a set of earlier summaries of consecutive parts of one video
- Never mention that you are summarizing a transcript or a chunk
- {type_instruction}
- {length_instruction}
- {format_instruction}"""

SUMMARY_USER_MESSAGE_TEMPLATE = """Text:
{text}

Summarize the text above."""

# ============================================================================
# Option Instructions
# ============================================================================

TYPE_INSTRUCTIONS = {
    "tl;dr": "Write a short, to-the-point overview that captures the gist of the text",
    "key-points": "Extract the most important points of the text as a list",
    "teaser": "Write an intriguing teaser that makes the reader want to watch the video",
    "headline": "Write a single headline that captures the main point of the text",
}

LENGTH_INSTRUCTIONS = {
    "tl;dr": {
        "short": "Use a single sentence",
        "medium": "Use three sentences at most",
        "long": "Use five sentences at most",
    },
    "key-points": {
        "short": "Use three points at most",
        "medium": "Use five points at most",
        "long": "Use seven points at most",
    },
    "teaser": {
        "short": "Use a single sentence",
        "medium": "Use three sentences at most",
        "long": "Use five sentences at most",
    },
    "headline": {
        "short": "Use twelve words at most",
        "medium": "Use seventeen words at most",
        "long": "Use twenty-two words at most",
    },
}

FORMAT_INSTRUCTIONS = {
    "plain-text": "Answer in plain text without any markdown",
    "markdown": "Answer in markdown (use '- ' bullets for lists, no headings)",
}
