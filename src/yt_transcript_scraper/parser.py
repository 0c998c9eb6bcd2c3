"""
parser.py — Turn a timed-text XML payload into transcript snippets.

The caption endpoint serves documents shaped like:

    <transcript>
      <text start="0.0" dur="1.54">Hey &lt;b&gt;there&lt;/b&gt;</text>
      ...
    </transcript>

Inline markup arrives escaped inside the text nodes, so after XML parsing
the snippet text still contains tags such as <b> or <font color="...">.
Those are stripped (all of them, or all but a small set of inline styling
tags when the caller wants formatting preserved) and HTML entities are
decoded afterwards.

defusedxml is used because the payload comes from the network.
"""

from __future__ import annotations

import re
from html import unescape

from defusedxml import ElementTree
from defusedxml.common import DefusedXmlException

from yt_transcript_scraper.models import FetchedTranscriptSnippet

_FORMATTING_TAGS = (
    "strong",  # important
    "em",  # emphasized
    "b",  # bold
    "i",  # italic
    "mark",  # marked
    "small",  # smaller
    "del",  # deleted
    "ins",  # inserted
    "sub",  # subscript
    "sup",  # superscript
)


class TranscriptParser:
    """
    Parser for one caption body.

    Args:
        preserve_formatting: Keep the inline styling tags listed in
                             _FORMATTING_TAGS instead of stripping every tag.
    """

    def __init__(self, preserve_formatting: bool = False) -> None:
        self._html_regex = self._get_html_regex(preserve_formatting)

    @staticmethod
    def _get_html_regex(preserve_formatting: bool) -> re.Pattern[str]:
        if preserve_formatting:
            formats_regex = "|".join(_FORMATTING_TAGS)
            formats_regex = r"<\/?(?!\/?(" + formats_regex + r")\b).*?\b>"
            return re.compile(formats_regex, re.IGNORECASE)
        return re.compile(r"<[^>]*>", re.IGNORECASE)

    def parse(self, raw_data: str) -> list[FetchedTranscriptSnippet]:
        """
        Parse a caption document into snippets, in document order.

        Entries without text are skipped.  A document that isn't valid XML,
        declares entities or a DTD, has a root other than <transcript>, or
        has no <text> entries yields an empty list: whether a video
        has captions at all is decided when the catalog is built, not here.

        Args:
            raw_data: The XML body returned by the caption URL.

        Returns:
            A list of FetchedTranscriptSnippet.
        """
        try:
            root = ElementTree.fromstring(raw_data)
        except (ElementTree.ParseError, DefusedXmlException):
            return []
        if root.tag != "transcript":
            return []

        return [
            FetchedTranscriptSnippet(
                text=unescape(self._html_regex.sub("", element.text)),
                start=_parse_seconds(element.attrib.get("start")),
                duration=_parse_seconds(element.attrib.get("dur")),
            )
            for element in root.findall("text")
            if element.text
        ]


def _parse_seconds(raw_value: str | None) -> float:
    if raw_value is None:
        return 0.0
    try:
        return float(raw_value)
    except ValueError:
        return 0.0
