"""Services for bidi-inspector."""

from .browsing_context import BrowsingContext, RemoteElement
from .browsing_context_inspector import BrowsingContextInspector
from .event_inspector import EventInspector, Registration
from .log_inspector import LogInspector
from .log_recorder import LogRecorder
from .protocol_channel import ProtocolChannel, WebSocketChannel
from .script import ScriptManager

__all__ = [
    "BrowsingContext",
    "BrowsingContextInspector",
    "EventInspector",
    "LogInspector",
    "LogRecorder",
    "ProtocolChannel",
    "Registration",
    "RemoteElement",
    "ScriptManager",
    "WebSocketChannel",
]
