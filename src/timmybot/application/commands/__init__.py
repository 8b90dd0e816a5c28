"""
Application Commands

Handlers for commands that change queue or voice state, plus the
descriptors and the catalog builder that register them.
"""

from timmybot.application.commands.clear_queue import ClearQueueHandler
from timmybot.application.commands.descriptors import DEFAULT_DESCRIPTORS
from timmybot.application.commands.play_track import PlayTrackHandler
from timmybot.application.commands.registry import build_catalog
from timmybot.application.commands.skip_track import SkipTrackHandler
from timmybot.application.commands.voice_channel import JoinVoiceHandler, LeaveVoiceHandler

__all__ = [
    "DEFAULT_DESCRIPTORS",
    "build_catalog",
    # Queue
    "PlayTrackHandler",
    "SkipTrackHandler",
    "ClearQueueHandler",
    # Voice
    "JoinVoiceHandler",
    "LeaveVoiceHandler",
]
