"""yt-dlp payloads and options as pydantic models, plus the extraction cache."""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from timmybot.domain.shared.messages import LogTemplates
from timmybot.domain.shared.types import NonEmptyStr, NonNegativeFloat, PositiveInt

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS: Final[int] = 3600
CACHE_MAX_ENTRIES: Final[int] = 500
UNKNOWN_TITLE: Final[str] = "Unknown Title"


class StreamFormat(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    url: NonEmptyStr | None = None
    acodec: NonEmptyStr | None = None

    @property
    def has_audio(self) -> bool:
        return self.url is not None and self.acodec != "none"


class ExtractedTrack(BaseModel):
    """The few fields of a yt-dlp info dict that playback needs; the rest is dropped."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: NonEmptyStr = UNKNOWN_TITLE
    url: NonEmptyStr | None = None
    webpage_url: NonEmptyStr | None = None
    formats: tuple[StreamFormat, ...] = ()

    @field_validator("url", "webpage_url", mode="before")
    @classmethod
    def _blank_is_missing(cls, v: Any) -> str | None:
        return v if isinstance(v, str) and v.strip() else None

    @field_validator("title", mode="before")
    @classmethod
    def _blank_title(cls, v: Any) -> str:
        return v if isinstance(v, str) and v.strip() else UNKNOWN_TITLE

    @property
    def stream_url(self) -> str | None:
        """The direct URL, else the last (best) format that carries audio."""
        if self.url:
            return self.url
        for fmt in reversed(self.formats):
            if fmt.has_audio:
                return fmt.url
        return None


class YtDlpOptions(BaseModel):
    """Parameters handed to ``YoutubeDL``."""

    model_config = ConfigDict(frozen=True)

    format: NonEmptyStr
    quiet: bool = True
    noprogress: bool = True
    noplaylist: bool = True
    skip_download: bool = True
    retries: PositiveInt = 3
    socket_timeout: PositiveInt = 10


class CachedExtraction(BaseModel):
    model_config = ConfigDict(frozen=True)

    track: ExtractedTrack | None
    stored_at: NonNegativeFloat


class ExtractionCache:
    """Query -> extraction result, bounded in age and size.

    Misses (``track is None``) are cached too so a dead link is not re-fetched
    on every retry. When full, expired entries go first, then the oldest.
    """

    def __init__(
        self, ttl_s: float = CACHE_TTL_SECONDS, max_entries: int = CACHE_MAX_ENTRIES
    ) -> None:
        self._ttl = ttl_s
        self._max_entries = max_entries
        self._entries: OrderedDict[str, CachedExtraction] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, query: object) -> bool:
        return query in self._entries

    def clear(self) -> None:
        self._entries.clear()

    def get(self, query: str, now: float) -> CachedExtraction | None:
        entry = self._entries.get(query)
        if entry is None:
            return None
        if now - entry.stored_at >= self._ttl:
            del self._entries[query]
            return None
        return entry

    def put(self, query: str, track: ExtractedTrack | None, now: float) -> None:
        self._entries[query] = CachedExtraction(track=track, stored_at=now)
        self._entries.move_to_end(query)
        if len(self._entries) > self._max_entries:
            self._shrink(now)

    def _shrink(self, now: float) -> None:
        expired = [q for q, e in self._entries.items() if now - e.stored_at >= self._ttl]
        for query in expired:
            del self._entries[query]
        if expired:
            logger.debug(LogTemplates.CACHE_EXPIRED_CLEANED, len(expired))

        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)
