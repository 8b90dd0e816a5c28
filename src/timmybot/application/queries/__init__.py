"""
Application Queries

Read-only command handlers: queue inspection and bot information.
"""

from timmybot.application.queries.get_current import GetCurrentTrackHandler
from timmybot.application.queries.get_queue import GetQueueHandler
from timmybot.application.queries.info import ExplainHandler, HelpHandler, PingHandler

__all__ = [
    "GetCurrentTrackHandler",
    "GetQueueHandler",
    "PingHandler",
    "HelpHandler",
    "ExplainHandler",
]
