"""
api.py — FastAPI REST API for yt-transcript-scraper.

Wraps the YouTubeTranscriptApi facade for browser extensions and other
HTTP clients.

Endpoints:
    GET /api/info/{video_id}        Which caption tracks a video offers.
    GET /api/subtitles/{video_id}   Timed snippets, ?lang= with English fallback.
    GET /api/text/{video_id}        Plain text, ?lang= with English fallback.
    GET /transcript/{video_id}      Formatted transcript (json, pretty, text, srt, webvtt).
    GET /health                     Simple health-check for load balancers / monitoring.

Run with:
    uvicorn yt_transcript_scraper.api:app

Proxy settings come from the YT_TRANSCRIPT_* environment variables (see
proxies.proxy_config_from_env).  The global exception handler catches any
TranscriptError and converts it to the appropriate HTTP response using the
status code stored on the exception.
"""

from __future__ import annotations

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from yt_transcript_scraper.errors import TranscriptError
from yt_transcript_scraper.extractor import YouTubeTranscriptApi, extract, parse_video_id
from yt_transcript_scraper.proxies import proxy_config_from_env

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="YouTube Transcript Scraper API",
    description="Fetch YouTube video transcripts as timed snippets, plain text, "
                "JSON, or SRT/WebVTT subtitles.",
    version="0.1.0",
)

# Browser extensions call from their own chrome-extension:// origins.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["Content-Type"],
)


def get_api() -> YouTubeTranscriptApi:
    """
    Provide a facade for one request.

    A fresh instance per request keeps consent cookies from leaking between
    concurrent requests.  Tests override this via app.dependency_overrides.

    Raises:
        InvalidProxyConfig: The YT_TRANSCRIPT_* variables are inconsistent.
    """
    return YouTubeTranscriptApi(proxy_config=proxy_config_from_env())


# ---------------------------------------------------------------------------
# Global error handler
# ---------------------------------------------------------------------------

@app.exception_handler(TranscriptError)
async def transcript_error_handler(request: Request, exc: TranscriptError) -> JSONResponse:
    """
    Translate any TranscriptError (or subclass) into an HTTP error response.

    The http_status on the exception drives the response code, so individual
    endpoint code never needs to think about HTTP semantics.  It just raises
    the right library exception and this handler takes care of the rest.
    """
    return JSONResponse(
        status_code=exc.http_status,
        content={"error": exc.message},
    )


# ---------------------------------------------------------------------------
# Endpoints: facade calls
# ---------------------------------------------------------------------------

# The endpoints are plain `def`: the facade does blocking I/O through
# requests, so FastAPI runs them in its worker threadpool.

@app.get("/api/info/{video_id}")
def get_info(video_id: str, api: YouTubeTranscriptApi = Depends(get_api)) -> dict:
    """
    List the caption tracks available for a video.

    Returns `video_id`, `has_subtitles`, and a `languages` array where each
    entry has `code`, `name`, `is_generated`, and `is_translatable`.
    """
    return api.get_info(parse_video_id(video_id))


@app.get("/api/subtitles/{video_id}")
def get_subtitles(
    video_id: str,
    lang: str = Query(default="en", description="Preferred language code; falls back to English."),
    api: YouTubeTranscriptApi = Depends(get_api),
) -> list[dict]:
    """Return the transcript as an array of `{text, start, duration}` objects."""
    return api.get_subtitles(parse_video_id(video_id), lang)


@app.get("/api/text/{video_id}")
def get_text(
    video_id: str,
    lang: str = Query(default="en", description="Preferred language code; falls back to English."),
    api: YouTubeTranscriptApi = Depends(get_api),
) -> dict:
    """Return the transcript as `{"text": ...}`, one snippet per line."""
    return {"text": api.get_text(parse_video_id(video_id), lang)}


# ---------------------------------------------------------------------------
# Endpoints: formatted transcripts
# ---------------------------------------------------------------------------

# response_model=None is required because we return different Response subclasses
# depending on the format param.
@app.get("/transcript/{video_id}", response_model=None)
def get_transcript(
    video_id: str,
    format: str = Query(
        default="text",
        description="Output format: json, pretty, text, srt or webvtt.",
        pattern="^(json|pretty|text|srt|webvtt)$",
    ),
    lang: str = Query(
        default="",
        description="Comma-separated language codes in priority order (e.g. 'de,en'). Empty defaults to English.",
    ),
    translate: str | None = Query(
        default=None,
        description="Translate the transcript into this language code.",
    ),
    api: YouTubeTranscriptApi = Depends(get_api),
) -> Response:
    """
    Fetch and format the transcript for a single YouTube video.

    **video_id** is the 11-character YouTube video identifier
    (e.g. `dQw4w9WgXcQ`).

    `json` and `pretty` are served as application/json, the subtitle
    formats with their own media types, and `text` as plain text.
    """
    languages = [code.strip() for code in lang.split(",") if code.strip()] or None

    # extract() may raise TranscriptError subclasses; the global handler
    # will convert those into the correct HTTP error response.
    body = extract(video_id, languages=languages, fmt=format, translate=translate, api=api)

    if format in ("json", "pretty"):
        return Response(content=body, media_type="application/json")
    if format == "webvtt":
        return Response(content=body, media_type="text/vtt")
    if format == "srt":
        return Response(content=body, media_type="application/x-subrip")
    return PlainTextResponse(content=body)


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------

@app.get("/health")
async def health() -> dict:
    """
    Minimal health-check endpoint.

    Returns HTTP 200 with {"status": "ok"}.
    """
    return {"status": "ok"}
