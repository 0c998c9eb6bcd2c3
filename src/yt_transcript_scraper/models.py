"""
models.py — Immutable value types for fetched transcripts.

These are the results handed back to callers: a FetchedTranscript is
created once per successful caption fetch and never changes afterwards.
frozen=True makes instances hashable and prevents accidental mutation.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterator


@dataclass(frozen=True)
class FetchedTranscriptSnippet:
    """
    One timed caption unit.

    Attributes:
        text:     The caption text, markup stripped (or partially kept).
        start:    When the caption appears, in seconds from video start.
        duration: How long it stays on screen, in seconds.  Captions may
                  overlap; formatters clip the displayed end time.
    """
    text: str
    start: float
    duration: float


@dataclass(frozen=True)
class TranslationLanguage:
    language: str
    language_code: str


@dataclass(frozen=True)
class FetchedTranscript:
    """
    The snippets of one caption track plus the track's identity.

    Behaves like a read-only sequence of FetchedTranscriptSnippet: it
    supports len(), indexing, and can be iterated any number of times
    (the snippets are held in a tuple, not a one-shot stream).

    Attributes:
        snippets:      The snippets, in the order the caption body listed them.
        video_id:      The video the transcript belongs to.
        language:      Display name of the language, e.g. "English (auto-generated)".
        language_code: Language tag, e.g. "en" or "pt-BR".
        is_generated:  True for automatic speech recognition and translations.
    """
    snippets: tuple[FetchedTranscriptSnippet, ...]
    video_id: str
    language: str
    language_code: str
    is_generated: bool

    def __post_init__(self) -> None:
        # Callers usually pass a list; store a tuple so the instance stays immutable.
        object.__setattr__(self, "snippets", tuple(self.snippets))

    def __iter__(self) -> Iterator[FetchedTranscriptSnippet]:
        return iter(self.snippets)

    def __getitem__(self, index: int) -> FetchedTranscriptSnippet:
        return self.snippets[index]

    def __len__(self) -> int:
        return len(self.snippets)

    def to_raw_data(self) -> list[dict]:
        """Return the snippets as plain `{"text", "start", "duration"}` dicts."""
        return [asdict(snippet) for snippet in self.snippets]
