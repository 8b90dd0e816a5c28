"""Port interface for resolving track references to playable streams."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, ConfigDict

from timmybot.domain.shared.types import NonEmptyStr


class ResolvedStream(BaseModel):
    """A track reference resolved to something FFmpeg can play."""

    model_config = ConfigDict(frozen=True)

    title: NonEmptyStr
    stream_url: NonEmptyStr
    webpage_url: str | None = None


class AudioResolver(ABC):
    """Interface for resolving URLs and search queries to playable streams."""

    @abstractmethod
    async def resolve(self, query: NonEmptyStr) -> ResolvedStream | None:
        """Resolve a query or URL to a stream, or None if nothing matched."""
        ...

    @abstractmethod
    def is_url(self, query: NonEmptyStr) -> bool:
        ...
