"""Video URL normalisation for embedded players."""

import re


YOUTUBE_URL_PATTERN = re.compile(
    r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*"
)
YOUTUBE_ID_LENGTH = 11
YOUTUBE_EMBED_BASE = "https://www.youtube.com/embed/"


def extract_youtube_id(url: str) -> str | None:
    """Extract the 11-character video ID from a YouTube URL."""
    match = YOUTUBE_URL_PATTERN.match(url.strip())
    if match and len(match.group(2)) == YOUTUBE_ID_LENGTH:
        return match.group(2)
    return None


def get_embed_url(url: str) -> str:
    """Return an iframe-embeddable URL for a lesson video.

    URLs that are already embed URLs, and URLs that are not recognised as
    YouTube links, are returned unchanged.
    """
    if "embed" in url:
        return url

    video_id = extract_youtube_id(url)
    if video_id:
        return f"{YOUTUBE_EMBED_BASE}{video_id}"

    return url
