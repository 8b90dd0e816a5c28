"""Audio infrastructure - yt-dlp stream resolution."""

from timmybot.infrastructure.audio.models import ExtractedTrack, ExtractionCache, YtDlpOptions
from timmybot.infrastructure.audio.ytdlp_resolver import YtDlpResolver

__all__ = [
    "ExtractedTrack",
    "ExtractionCache",
    "YtDlpOptions",
    "YtDlpResolver",
]
