from typing import Any, Dict, Optional

from pytube import YouTube, extract
from pytube.exceptions import RegexMatchError

from tube2tldr.errors import InvalidInputError


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"


def extract_video_id(url: str) -> str:
    """Extract the video ID from a YouTube URL (watch, youtu.be, embed, shorts)."""
    if not url or not url.strip():
        raise InvalidInputError("URL cannot be empty")
    try:
        return extract.video_id(url.strip())
    except RegexMatchError:
        raise InvalidInputError(f"No YouTube video ID found in {url!r}") from None


def get_video_metadata(video_id: str, url: Optional[str] = None) -> Dict[str, Any]:
    """
    Get video metadata using pytube.
    Returns: title, channel, duration (seconds), URL
    """
    try:
        yt = YouTube(url or watch_url(video_id))
        return {
            "title": yt.title,
            "channel": yt.author,
            "duration": yt.length,  # in seconds
            "url": watch_url(video_id),
        }
    except Exception as e:
        # Metadata is only used for the summary header
        print(f"    Warning: could not fetch video metadata: {e}")
        return {
            "title": "Unknown",
            "channel": "Unknown",
            "duration": 0,
            "url": watch_url(video_id),
        }
