"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and the Discord and audio adapters.
"""

from timmybot.application.interfaces.audio_resolver import AudioResolver, ResolvedStream
from timmybot.application.interfaces.voice_adapter import VoiceAdapter

__all__ = [
    "AudioResolver",
    "ResolvedStream",
    "VoiceAdapter",
]
