"""
playability.py — Interpret the player API's playabilityStatus block.

YouTube answers every player request with a status (OK, ERROR,
LOGIN_REQUIRED, UNPLAYABLE, ...) and, when the status isn't OK, a reason
string meant for humans.  The reason text is the only way to tell a bot
check from an age gate, so the rules below match it literally.  Order
matters: anything that matches no specific rule falls through to
VideoUnplayable rather than being treated as playable.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from yt_transcript_scraper.errors import (
    AgeRestricted,
    InvalidVideoId,
    RequestBlocked,
    VideoUnavailable,
    VideoUnplayable,
)


class PlayabilityStatus(str, Enum):
    OK = "OK"
    ERROR = "ERROR"
    LOGIN_REQUIRED = "LOGIN_REQUIRED"


class PlayabilityFailedReason(str, Enum):
    BOT_DETECTED = "Sign in to confirm you're not a bot"
    AGE_RESTRICTED = "This video may be inappropriate for some users."
    VIDEO_UNAVAILABLE = "This video is unavailable"


def assert_playability(playability_status_data: Mapping[str, Any], video_id: str) -> None:
    """
    Raise the matching exception unless the video is playable.

    A missing status is treated as playable, because some clients omit the
    block entirely for ordinary videos.

    Args:
        playability_status_data: The `playabilityStatus` object of the
                                 player response (may be empty).
        video_id:                The ID the lookup was made with.

    Raises:
        RequestBlocked:   LOGIN_REQUIRED with the bot-detection reason.
        AgeRestricted:    LOGIN_REQUIRED with the age-gate reason.
        InvalidVideoId:   ERROR/unavailable and the "ID" is really a URL.
        VideoUnavailable: ERROR/unavailable for a plain ID.
        VideoUnplayable:  Any other non-OK status.
    """
    status = playability_status_data.get("status")
    if status is None or status == PlayabilityStatus.OK.value:
        return

    reason = playability_status_data.get("reason")

    if status == PlayabilityStatus.LOGIN_REQUIRED.value:
        if reason == PlayabilityFailedReason.BOT_DETECTED.value:
            raise RequestBlocked(video_id)
        if reason == PlayabilityFailedReason.AGE_RESTRICTED.value:
            raise AgeRestricted(video_id)

    if (
        status == PlayabilityStatus.ERROR.value
        and reason == PlayabilityFailedReason.VIDEO_UNAVAILABLE.value
    ):
        if video_id.startswith(("http://", "https://")):
            raise InvalidVideoId(video_id)
        raise VideoUnavailable(video_id)

    raise VideoUnplayable(video_id, reason, extract_sub_reasons(playability_status_data))


def extract_sub_reasons(playability_status_data: Mapping[str, Any]) -> list[str]:
    """Collect the non-empty sub-reason lines from the player's error screen."""
    # Any level may be missing or null.
    error_screen = playability_status_data.get("errorScreen") or {}
    renderer = error_screen.get("playerErrorMessageRenderer") or {}
    subreason = renderer.get("subreason") or {}
    runs = subreason.get("runs") or []
    return [run["text"] for run in runs if run.get("text")]
