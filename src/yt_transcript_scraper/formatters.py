"""
formatters.py — Render fetched transcripts as JSON, plain text, or subtitles.

Five formats are available and the set is closed:

    json    compact JSON list of {"text", "start", "duration"} objects
    pretty  the same JSON, indented
    text    snippet texts only, one per line
    srt     SubRip subtitles (numbered cues, comma before milliseconds)
    webvtt  WebVTT subtitles (WEBVTT header, dot before milliseconds)

Use load_formatter("srt") rather than instantiating classes by hand when the
format name comes from user input.
"""

from __future__ import annotations

import json
import math
from abc import ABC, abstractmethod
from typing import Any, Sequence

from yt_transcript_scraper.models import FetchedTranscript, FetchedTranscriptSnippet


class UnknownFormatterType(ValueError):
    """Raised when a format name isn't one of FormatterLoader.TYPES."""

    def __init__(self, formatter_type: str) -> None:
        self.formatter_type = formatter_type
        super().__init__(
            f"The format '{formatter_type}' is not supported. "
            f"Choose one of the following formats: {', '.join(FormatterLoader.TYPES)}"
        )


class Formatter(ABC):
    """Base class for all formatters."""

    @abstractmethod
    def format_transcript(self, transcript: FetchedTranscript, **kwargs: Any) -> str:
        """Render one transcript."""

    @abstractmethod
    def format_transcripts(self, transcripts: Sequence[FetchedTranscript], **kwargs: Any) -> str:
        """Render several transcripts as one document."""


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

class JSONFormatter(Formatter):
    """Extra keyword arguments are passed straight to json.dumps()."""

    def format_transcript(self, transcript: FetchedTranscript, **kwargs: Any) -> str:
        return json.dumps(transcript.to_raw_data(), **kwargs)

    def format_transcripts(self, transcripts: Sequence[FetchedTranscript], **kwargs: Any) -> str:
        return json.dumps([transcript.to_raw_data() for transcript in transcripts], **kwargs)


class PrettyPrintFormatter(JSONFormatter):
    def format_transcript(self, transcript: FetchedTranscript, **kwargs: Any) -> str:
        kwargs.setdefault("indent", 2)
        return super().format_transcript(transcript, **kwargs)

    def format_transcripts(self, transcripts: Sequence[FetchedTranscript], **kwargs: Any) -> str:
        kwargs.setdefault("indent", 2)
        return super().format_transcripts(transcripts, **kwargs)


# ---------------------------------------------------------------------------
# Plain text
# ---------------------------------------------------------------------------

class TextFormatter(Formatter):
    def format_transcript(self, transcript: FetchedTranscript, **kwargs: Any) -> str:
        return "\n".join(snippet.text for snippet in transcript)

    def format_transcripts(self, transcripts: Sequence[FetchedTranscript], **kwargs: Any) -> str:
        return "\n\n\n".join(self.format_transcript(transcript, **kwargs) for transcript in transcripts)


# ---------------------------------------------------------------------------
# Subtitles
# ---------------------------------------------------------------------------

class _TextBasedFormatter(TextFormatter):
    """
    Shared cue rendering for the subtitle formats.

    A cue's end time is start + duration, clipped to the next cue's start
    so cues never overlap on screen.  The last cue is never clipped.
    Subclasses decide the timestamp separator, the per-cue layout and the
    document header.
    """

    MILLISECOND_SEPARATOR = ","

    @abstractmethod
    def _format_cue(self, index: int, time_text: str, snippet: FetchedTranscriptSnippet) -> str:
        pass

    @abstractmethod
    def _format_document(self, cues: list[str]) -> str:
        pass

    def _seconds_to_timestamp(self, time: float) -> str:
        # Work in whole milliseconds so a fraction that rounds up to 1000
        # carries into the seconds instead of printing four digits.  Halves
        # round up.
        total_ms = math.floor(time * 1000 + 0.5)
        total_secs, ms = divmod(total_ms, 1000)
        hours, remainder = divmod(total_secs, 3600)
        mins, secs = divmod(remainder, 60)
        return f"{hours:02d}:{mins:02d}:{secs:02d}{self.MILLISECOND_SEPARATOR}{ms:03d}"

    def format_transcript(self, transcript: FetchedTranscript, **kwargs: Any) -> str:
        snippets = list(transcript)
        cues = []
        for index, snippet in enumerate(snippets):
            end = snippet.start + snippet.duration
            if index + 1 < len(snippets):
                end = min(end, snippets[index + 1].start)
            time_text = (
                f"{self._seconds_to_timestamp(snippet.start)} --> "
                f"{self._seconds_to_timestamp(end)}"
            )
            cues.append(self._format_cue(index, time_text, snippet))
        return self._format_document(cues)


class SRTFormatter(_TextBasedFormatter):
    MILLISECOND_SEPARATOR = ","

    def _format_cue(self, index: int, time_text: str, snippet: FetchedTranscriptSnippet) -> str:
        return f"{index + 1}\n{time_text}\n{snippet.text}"

    def _format_document(self, cues: list[str]) -> str:
        return "\n\n".join(cues) + "\n"


class WebVTTFormatter(_TextBasedFormatter):
    MILLISECOND_SEPARATOR = "."

    def _format_cue(self, index: int, time_text: str, snippet: FetchedTranscriptSnippet) -> str:
        return f"{time_text}\n{snippet.text}"

    def _format_document(self, cues: list[str]) -> str:
        return "WEBVTT\n\n" + "\n\n".join(cues) + "\n"


# ---------------------------------------------------------------------------
# Lookup by name
# ---------------------------------------------------------------------------

class FormatterLoader:
    TYPES: dict[str, type[Formatter]] = {
        "json": JSONFormatter,
        "pretty": PrettyPrintFormatter,
        "text": TextFormatter,
        "webvtt": WebVTTFormatter,
        "srt": SRTFormatter,
    }

    def load(self, formatter_type: str = "pretty") -> Formatter:
        """
        Return a new formatter for a format name.

        Raises:
            UnknownFormatterType: `formatter_type` isn't one of TYPES.
        """
        if formatter_type not in self.TYPES:
            raise UnknownFormatterType(formatter_type)
        return self.TYPES[formatter_type]()


def load_formatter(formatter_type: str = "pretty") -> Formatter:
    return FormatterLoader().load(formatter_type)
