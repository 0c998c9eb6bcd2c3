"""
transcripts.py — The caption catalog of one video.

A TranscriptList is built once per lookup from the `captions` block of the
player response.  It holds lazy Transcript handles: each knows where its
caption body lives but fetches nothing until Transcript.fetch() is called.

Lookup precedence: the caller's language order wins, and within one
language a manually created track beats an auto-generated one.
"""

from __future__ import annotations

import logging
from itertools import chain
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Mapping, Sequence

from yt_transcript_scraper.errors import (
    NoTranscriptFound,
    NotTranslatable,
    PoTokenRequired,
    TranslationLanguageNotAvailable,
)
from yt_transcript_scraper.http_client import send_checked
from yt_transcript_scraper.models import FetchedTranscript, TranslationLanguage
from yt_transcript_scraper.parser import TranscriptParser
from yt_transcript_scraper.settings import PO_TOKEN_URL_MARKER, SRV3_FORMAT_PARAM

if TYPE_CHECKING:
    from yt_transcript_scraper.http_client import HttpClient

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Transcript: one caption track
# ---------------------------------------------------------------------------

class Transcript:
    """
    A lazy handle to one caption track.

    Attributes:
        video_id:              The video the track belongs to.
        language:              Display name, e.g. "English (auto-generated)".
        language_code:         Language tag, e.g. "en".
        is_generated:          True for ASR tracks and for translations.
        translation_languages: Languages this track can be translated into
                               (empty when the track isn't translatable).
    """

    def __init__(
        self,
        http_client: HttpClient,
        video_id: str,
        url: str,
        language: str,
        language_code: str,
        is_generated: bool,
        translation_languages: Sequence[TranslationLanguage],
    ) -> None:
        self._http_client = http_client
        self.video_id = video_id
        self._url = url
        self.language = language
        self.language_code = language_code
        self.is_generated = is_generated
        self.translation_languages = list(translation_languages)
        self._translation_languages_dict = {
            translation_language.language_code: translation_language.language
            for translation_language in self.translation_languages
        }

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_translatable(self) -> bool:
        return len(self.translation_languages) > 0

    def fetch(self, preserve_formatting: bool = False) -> FetchedTranscript:
        """
        Download and parse this track's caption body.

        Args:
            preserve_formatting: Keep inline styling tags such as <b> and <i>.

        Returns:
            A new FetchedTranscript.

        Raises:
            PoTokenRequired:      The URL needs a token we can't produce
                                  (raised before any request is made).
            IpBlocked:            YouTube answered HTTP 429.
            YouTubeRequestFailed: Any other failed request.
        """
        if PO_TOKEN_URL_MARKER in self._url:
            raise PoTokenRequired(self.video_id)

        logger.debug("Fetching %s transcript for %s", self.language_code, self.video_id)
        response = send_checked(self.video_id, self._http_client.get, self._url)
        snippets = TranscriptParser(preserve_formatting=preserve_formatting).parse(response.text)
        return FetchedTranscript(
            snippets=snippets,
            video_id=self.video_id,
            language=self.language,
            language_code=self.language_code,
            is_generated=self.is_generated,
        )

    def translate(self, language_code: str) -> Transcript:
        """
        Return a handle to this track machine-translated into another language.

        The original handle is left untouched.  A translated track can't be
        translated again, so its translation_languages is empty.

        Raises:
            NotTranslatable:                 This track offers no translations.
            TranslationLanguageNotAvailable: `language_code` isn't one of this
                                             track's translation targets.
        """
        if not self.is_translatable:
            raise NotTranslatable(self.video_id)

        if language_code not in self._translation_languages_dict:
            raise TranslationLanguageNotAvailable(self.video_id)

        return Transcript(
            self._http_client,
            self.video_id,
            f"{self._url}&tlang={language_code}",
            self._translation_languages_dict[language_code],
            language_code,
            True,
            [],
        )

    def __str__(self) -> str:
        translatable = "[TRANSLATABLE]" if self.is_translatable else ""
        return f'{self.language_code} ("{self.language}"){translatable}'

    def __repr__(self) -> str:
        return (
            f"Transcript(video_id={self.video_id!r}, language_code={self.language_code!r}, "
            f"is_generated={self.is_generated!r})"
        )


# ---------------------------------------------------------------------------
# TranscriptList: the catalog
# ---------------------------------------------------------------------------

class TranscriptList:
    """
    All caption tracks available for one video.

    Iterating yields every track, manually created ones first.  Use the
    find_* methods to pick a track by language.
    """

    def __init__(
        self,
        video_id: str,
        manually_created_transcripts: Mapping[str, Transcript],
        generated_transcripts: Mapping[str, Transcript],
        translation_languages: Sequence[TranslationLanguage],
    ) -> None:
        self.video_id = video_id
        self._manually_created_transcripts = dict(manually_created_transcripts)
        self._generated_transcripts = dict(generated_transcripts)
        self._translation_languages = tuple(translation_languages)

    @property
    def translation_languages(self) -> tuple[TranslationLanguage, ...]:
        return self._translation_languages

    @staticmethod
    def build(
        http_client: HttpClient,
        video_id: str,
        captions_json: Mapping[str, Any],
    ) -> TranscriptList:
        """
        Build the catalog from `playerCaptionsTracklistRenderer`.

        Tracks are keyed by language code within their tier, so if YouTube
        lists two tracks with the same code and origin, the later one wins.
        Only tracks flagged isTranslatable get the translation languages.

        Args:
            http_client:   Transport the Transcript handles will fetch with.
            video_id:      The video the catalog belongs to.
            captions_json: The caption track listing from the player response.

        Returns:
            A TranscriptList.
        """
        translation_languages = [
            TranslationLanguage(
                language=_run_text(translation_language.get("languageName"))
                or translation_language["languageCode"],
                language_code=translation_language["languageCode"],
            )
            for translation_language in captions_json.get("translationLanguages", [])
        ]

        manually_created_transcripts: dict[str, Transcript] = {}
        generated_transcripts: dict[str, Transcript] = {}

        for caption in captions_json["captionTracks"]:
            is_generated = caption.get("kind", "") == "asr"
            transcript_dict = generated_transcripts if is_generated else manually_created_transcripts
            language_code = caption["languageCode"]

            transcript_dict[language_code] = Transcript(
                http_client,
                video_id,
                caption["baseUrl"].replace(SRV3_FORMAT_PARAM, ""),
                _run_text(caption.get("name")) or language_code,
                language_code,
                is_generated,
                translation_languages if caption.get("isTranslatable", False) else [],
            )

        logger.debug(
            "Catalog for %s: %d manual, %d generated, %d translation languages",
            video_id,
            len(manually_created_transcripts),
            len(generated_transcripts),
            len(translation_languages),
        )
        return TranscriptList(
            video_id,
            manually_created_transcripts,
            generated_transcripts,
            translation_languages,
        )

    def __iter__(self) -> Iterator[Transcript]:
        return chain(
            self._manually_created_transcripts.values(),
            self._generated_transcripts.values(),
        )

    def find_transcript(self, language_codes: Iterable[str]) -> Transcript:
        """
        Find a track in the first available of the given languages.

        For each language code in order, a manually created track is
        preferred over a generated one.

        Args:
            language_codes: Language codes in descending priority,
                            e.g. ["de", "en"].

        Raises:
            NoTranscriptFound: None of the codes has a track.
        """
        return self._find_transcript(
            language_codes,
            [self._manually_created_transcripts, self._generated_transcripts],
        )

    def find_generated_transcript(self, language_codes: Iterable[str]) -> Transcript:
        """Like find_transcript(), but only considers auto-generated tracks."""
        return self._find_transcript(language_codes, [self._generated_transcripts])

    def find_manually_created_transcript(self, language_codes: Iterable[str]) -> Transcript:
        """Like find_transcript(), but only considers manually created tracks."""
        return self._find_transcript(language_codes, [self._manually_created_transcripts])

    def _find_transcript(
        self,
        language_codes: Iterable[str],
        transcript_dicts: list[dict[str, Transcript]],
    ) -> Transcript:
        # Materialize first: a generator would be exhausted by the time
        # NoTranscriptFound wants to list the requested codes.
        language_codes = list(language_codes)
        for language_code in language_codes:
            for transcript_dict in transcript_dicts:
                if language_code in transcript_dict:
                    return transcript_dict[language_code]

        raise NoTranscriptFound(self.video_id, language_codes, self)

    def __str__(self) -> str:
        translation_descriptions = (
            f'{translation_language.language_code} ("{translation_language.language}")'
            for translation_language in self._translation_languages
        )
        return (
            f"For this video ({self.video_id}) transcripts are available in the "
            f"following languages:\n\n"
            f"(MANUALLY CREATED)\n"
            f"{_describe(self._manually_created_transcripts.values())}\n\n"
            f"(GENERATED)\n"
            f"{_describe(self._generated_transcripts.values())}\n\n"
            f"(TRANSLATION LANGUAGES)\n"
            f"{_describe(translation_descriptions)}"
        )


def _describe(items: Iterable[object]) -> str:
    description = "\n".join(f" - {item}" for item in items)
    return description if description else "None"


def _run_text(text_json: Mapping[str, Any] | None) -> str:
    """Read a YouTube text object: `{"runs": [{"text": ...}]}` or `{"simpleText": ...}`."""
    if not text_json:
        return ""
    runs = text_json.get("runs")
    if runs:
        return runs[0].get("text", "")
    return text_json.get("simpleText", "")
