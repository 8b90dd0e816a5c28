"""AudioResolver backed by yt-dlp: URLs are extracted directly, anything else is searched."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from typing import Any, Final, cast

from yt_dlp import YoutubeDL

from timmybot.application.interfaces.audio_resolver import AudioResolver, ResolvedStream
from timmybot.config.settings import AudioSettings
from timmybot.domain.shared.messages import LogTemplates
from timmybot.infrastructure.audio.models import ExtractedTrack, ExtractionCache, YtDlpOptions
from timmybot.utils.reply import truncate

logger = logging.getLogger(__name__)

# Shared by every resolver in the process; extraction is slow and results are stable.
_info_cache = ExtractionCache()

_URL_RE: Final[re.Pattern[str]] = re.compile(r"^(?:https?://|www\.)", re.IGNORECASE)
_SEARCH_PREFIX: Final[str] = "ytsearch1:"
_LOG_QUERY_LIMIT: Final[int] = 60


class YtDlpResolver(AudioResolver):
    def __init__(self, settings: AudioSettings | None = None) -> None:
        settings = settings or AudioSettings()
        self._params = YtDlpOptions(format=settings.ytdlp_format).model_dump()

    def is_url(self, query: str) -> bool:
        return _URL_RE.match(query.strip()) is not None

    async def resolve(self, query: str) -> ResolvedStream | None:
        track = await asyncio.to_thread(self._lookup, query)
        if track is None:
            return None

        stream_url = track.stream_url
        if stream_url is None:
            logger.warning(LogTemplates.YTDLP_NO_STREAM_URL, track.title)
            return None

        return ResolvedStream(
            title=track.title, stream_url=stream_url, webpage_url=track.webpage_url
        )

    def _lookup(self, query: str) -> ExtractedTrack | None:
        """Worker-thread half of ``resolve``: cache first, then yt-dlp."""
        now = time.time()
        cached = _info_cache.get(query, now)
        if cached is not None:
            logger.debug(LogTemplates.CACHE_HIT, truncate(query, _LOG_QUERY_LIMIT))
            return cached.track

        target = query if self.is_url(query) else f"{_SEARCH_PREFIX}{query}"
        try:
            with YoutubeDL(params=cast(Any, self._params)) as ydl:
                data = ydl.extract_info(target, download=False)
        except Exception:
            # Not cached: the failure may be transient.
            logger.exception(LogTemplates.YTDLP_FAILED_EXTRACT, truncate(query, _LOG_QUERY_LIMIT))
            return None

        track = self._first_track(data)
        _info_cache.put(query, track, now)
        return track

    @staticmethod
    def _first_track(data: Any) -> ExtractedTrack | None:
        if not isinstance(data, dict):
            return None

        # Search results arrive wrapped in a playlist.
        if "entries" in data:
            entries = data.get("entries") or []
            data = next((e for e in entries if isinstance(e, dict)), None)
            if data is None:
                return None

        return ExtractedTrack.model_validate(data)
