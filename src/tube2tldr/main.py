"""Main entry point for the application."""

import argparse
import json
import os
import sys
import time
from typing import Any, Dict, List, Optional

from tube2tldr.chunk import chunk_text, count_words, format_ts, simple_token_count
from tube2tldr.config import Settings
from tube2tldr.errors import InvalidInputError, SummarizationError, Tube2TldrError
from tube2tldr.messages import (
    GrabTranscript,
    Message,
    Status,
    TranscriptAcquired,
    TranscriptUnavailable,
    to_dict,
)
from tube2tldr.models import ReductionResult, Transcript
from tube2tldr.pipeline import SummaryPipeline
from tube2tldr.scheduler import SummaryScheduler
from tube2tldr.summariser import (
    SUMMARY_FORMATS,
    SUMMARY_LENGTHS,
    SUMMARY_TYPES,
    OpenAISummariser,
    SummaryOptions,
)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NO_TRANSCRIPT = 2


def print_message(message: Message, verbose: bool = False, as_json: bool = False) -> None:
    """Show a grabber message on the console."""
    if as_json:
        print(json.dumps(to_dict(message)))
    elif isinstance(message, Status):
        if verbose:
            print(f"  {message.text}")
    elif isinstance(message, TranscriptUnavailable):
        print(message.text)
    elif isinstance(message, TranscriptAcquired):
        print(f"Transcript received. Length: {len(message.text):,} characters")
    else:
        raise InvalidInputError(f"Unknown message type: {type(message).__name__}")


def build_header(metadata: Dict[str, Any]) -> str:
    """Build header section with title, channel, URL and duration."""
    duration_ts = format_ts(metadata.get("duration", 0))

    return f"""# {metadata.get("title", "Video Summary")}

**Channel:** {metadata.get("channel", "Unknown")}
**URL:** {metadata.get("url", "")}
**Duration:** {duration_ts}"""


def build_summary_markdown(result: ReductionResult, metadata: Optional[Dict[str, Any]] = None) -> str:
    parts: List[str] = []
    if metadata:
        parts.append(build_header(metadata))
    parts.append("## Summary\n\n" + result.final)
    if len(result.levels) > 1:
        parts.append("## Section summaries\n\n" + result.first_level)
    return "\n\n".join(parts) + "\n"


def write_outputs(output_folder: str, transcript: Transcript, summary_markdown: str) -> None:
    os.makedirs(output_folder, exist_ok=True)

    with open(f"{output_folder}/transcript.jsonl", "w", encoding="utf-8") as f:
        for line in transcript.lines:
            f.write(json.dumps(line.to_dict()) + "\n")
    print(f"Transcript saved to {output_folder}/transcript.jsonl")

    with open(f"{output_folder}/transcript.txt", "w", encoding="utf-8") as f:
        f.write(transcript.to_timestamped_text() + "\n")
    print(f"Readable transcript saved to {output_folder}/transcript.txt")

    with open(f"{output_folder}/summary.md", "w", encoding="utf-8") as f:
        f.write(summary_markdown)
    print(f"Summary saved to {output_folder}/summary.md")


def make_pipeline(settings: Settings) -> SummaryPipeline:
    def status(message: str) -> None:
        if settings.verbose or message.startswith("Warning"):
            print(f"  {message}")

    return SummaryPipeline(
        OpenAISummariser(settings),
        SummaryOptions.from_settings(settings),
        settings,
        status_fn=status,
    )


def check_pipeline(pipeline: SummaryPipeline) -> bool:
    """Fail early, before any page or file work, when summaries cannot be produced."""
    try:
        pipeline.check_available()
    except SummarizationError as e:
        print(f"Error: {e}")
        if isinstance(pipeline.capability, OpenAISummariser):
            print("Set OPENAI_API_KEY environment variable or add it to your .env file.")
        return False
    return True


def print_level(level: int, level_text: str) -> None:
    print("\n" + "=" * 60)
    if level == 1:
        print("SUMMARY")
    else:
        print(f"SUMMARY OF SUMMARIES (level {level})")
    print("=" * 60)
    print(level_text)


def summarize_text(text: str, settings: Settings, pipeline: Optional[SummaryPipeline] = None) -> ReductionResult:
    """Summarise a text, printing the first level as soon as it is ready."""
    pipeline = pipeline or make_pipeline(settings)
    print(f"Summarising {count_words(text):,} words...")

    result = pipeline.run_levels(text, on_level=print_level)
    if isinstance(pipeline.capability, OpenAISummariser):
        pipeline.capability.print_usage_summary()
    return result


def summarize_video(
    url: str,
    settings: Settings,
    output_folder: Optional[str] = None,
    as_json: bool = False,
) -> int:
    """Grab the transcript from the video page and summarise it."""
    pipeline = make_pipeline(settings)
    if not check_pipeline(pipeline):
        return EXIT_FAILURE

    # selenium and pytube are only needed for this command
    from tube2tldr.browser import open_page
    from tube2tldr.grabber import TranscriptGrabber
    from tube2tldr.video import extract_video_id, get_video_metadata

    print(f"Summarising video: {url}")
    try:
        video_id = extract_video_id(url)
    except InvalidInputError as e:
        print(f"Error: {e}")
        return EXIT_FAILURE

    if settings.verbose:
        print("  Step 1: Opening the video page...")
    with open_page(url, headless=settings.headless) as page:
        if settings.verbose:
            print("  Step 2: Grabbing the transcript...")
        grabber = TranscriptGrabber(page, settings)
        transcript = grabber.handle(
            GrabTranscript(), lambda message: print_message(message, settings.verbose, as_json)
        )

    if transcript is None:
        return EXIT_NO_TRANSCRIPT

    if settings.verbose:
        print("  Step 3: Summarising the transcript...")
    try:
        result = summarize_text(transcript.to_text(), settings, pipeline)
    except Tube2TldrError as e:
        print(f"Error: Summary generation failed: {e}")
        return EXIT_FAILURE

    metadata = get_video_metadata(video_id, url)
    write_outputs(output_folder or f"output_{video_id}", transcript, build_summary_markdown(result, metadata))
    return EXIT_OK


def summarize_file(path: str, settings: Settings) -> int:
    """Summarise a local text file."""
    pipeline = make_pipeline(settings)
    if not check_pipeline(pipeline):
        return EXIT_FAILURE

    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        print(f"Error: could not read {path}: {e}")
        return EXIT_FAILURE

    try:
        summarize_text(text, settings, pipeline)
    except Tube2TldrError as e:
        print(f"Error: Summary generation failed: {e}")
        return EXIT_FAILURE
    return EXIT_OK


def chunk_file(path: str, settings: Settings) -> int:
    """Print the chunks a file would be summarised in."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            chunks = chunk_text(f.read(), settings.max_words_per_chunk)
    except OSError as e:
        print(f"Error: could not read {path}: {e}")
        return EXIT_FAILURE
    except InvalidInputError as e:
        print(f"Error: {e}")
        return EXIT_FAILURE

    for ndx, chunk in enumerate(chunks, 1):
        print(
            f"--- chunk {ndx}/{len(chunks)} "
            f"({count_words(chunk)} words, ~{simple_token_count(chunk)} tokens) ---"
        )
        print(chunk)
        print()
    return EXIT_OK


def watch_file(path: str, settings: Settings, poll_seconds: float = 0.5) -> int:
    """Re-summarise a text file every time it changes (debounced)."""
    pipeline = make_pipeline(settings)
    if not check_pipeline(pipeline):
        return EXIT_FAILURE

    def on_summary(summary: str) -> None:
        print("=" * 60)
        print("Summary up to date.")

    def on_error(exc: Exception) -> None:
        print(f"Error: Summary generation failed: {exc}")
        print("Keeping the previous summary.")

    scheduler = SummaryScheduler(
        lambda text, token, on_level: pipeline.run(text, cancel=token, on_level=on_level),
        debounce_seconds=settings.debounce_seconds,
        on_status=lambda message: print(f"  {message}"),
        on_summary=on_summary,
        on_error=on_error,
        on_level=print_level,
    )

    print(f"Watching {path} (Ctrl+C to stop)")
    last_mtime = None
    try:
        while True:
            try:
                mtime = os.path.getmtime(path)
            except OSError:
                mtime = None
            if mtime is not None and mtime != last_mtime:
                last_mtime = mtime
                with open(path, "r", encoding="utf-8") as f:
                    text = f.read()
                if text.strip():
                    scheduler.submit(text)
            time.sleep(poll_seconds)
    except KeyboardInterrupt:
        scheduler.cancel()
        print("\nGoodbye!")
    return EXIT_OK


def _add_summary_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--type", choices=SUMMARY_TYPES, help="Type of summary")
    parser.add_argument("--format", choices=SUMMARY_FORMATS, help="Summary output format")
    parser.add_argument("--length", choices=SUMMARY_LENGTHS, help="Summary length")
    parser.add_argument("--max-words", type=int, help="Word budget per chunk")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with subcommands."""
    parser = argparse.ArgumentParser(
        description="tube2tldr - Grab a YouTube transcript and summarise it",
        prog="tube2tldr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    video_parser = subparsers.add_parser("summarize", help="Summarise a YouTube video")
    video_parser.add_argument("url", help="YouTube video URL")
    video_parser.add_argument("--out", help="Output folder (default: output_<video id>)")
    video_parser.add_argument("--no-headless", action="store_true", help="Show the browser window")
    video_parser.add_argument("--json", action="store_true", help="Print grabber messages as JSON lines")
    _add_summary_options(video_parser)

    file_parser = subparsers.add_parser("summarize-file", help="Summarise a text file")
    file_parser.add_argument("path", help="Path to a text file")
    _add_summary_options(file_parser)

    chunk_parser = subparsers.add_parser("chunk", help="Show how a text file is chunked")
    chunk_parser.add_argument("path", help="Path to a text file")
    chunk_parser.add_argument("--max-words", type=int, help="Word budget per chunk")

    watch_parser = subparsers.add_parser("watch", help="Re-summarise a text file whenever it changes")
    watch_parser.add_argument("path", help="Path to a text file")
    _add_summary_options(watch_parser)

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return EXIT_OK

    try:
        settings = Settings.from_env(
            summary_type=getattr(args, "type", None),
            summary_format=getattr(args, "format", None),
            summary_length=getattr(args, "length", None),
            max_words_per_chunk=getattr(args, "max_words", None),
            verbose=getattr(args, "verbose", None) or None,
            headless=False if getattr(args, "no_headless", False) else None,
        )
        if args.command != "chunk":
            SummaryOptions.from_settings(settings)
    except InvalidInputError as e:
        print(f"Error: {e}")
        return EXIT_FAILURE

    if args.command == "summarize":
        return summarize_video(args.url, settings, args.out, args.json)
    if args.command == "summarize-file":
        return summarize_file(args.path, settings)
    if args.command == "chunk":
        return chunk_file(args.path, settings)
    if args.command == "watch":
        return watch_file(args.path, settings)

    parser.print_help()
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
