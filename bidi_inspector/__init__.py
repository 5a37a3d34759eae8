"""bidi-inspector - event inspection and node location over WebDriver BiDi."""

from ._version import __version__
from .config import ClientConfig, load_config
from .errors import (
    BidiError,
    CommandTimeoutError,
    DeserializationError,
    InspectorClosedError,
    NoSuchElementError,
    ProtocolError,
    ScriptError,
    TransportError,
    UnsubscribeError,
)
from .filters import FilterBy, all_of
from .models import (
    BrowsingContextInfo,
    LogEntry,
    LogLevel,
    LogType,
    Locator,
    NavigationInfo,
    ReferenceValue,
    RemoteValue,
    ResultOwnership,
    UserPromptInfo,
)
from .services import (
    BrowsingContext,
    BrowsingContextInspector,
    EventInspector,
    LogInspector,
    LogRecorder,
    ProtocolChannel,
    ScriptManager,
    WebSocketChannel,
)

__all__ = [
    # Services
    'BrowsingContext',
    'BrowsingContextInspector',
    'EventInspector',
    'LogInspector',
    'LogRecorder',
    'ProtocolChannel',
    'ScriptManager',
    'WebSocketChannel',
    # Models
    'BrowsingContextInfo',
    'LogEntry',
    'LogLevel',
    'LogType',
    'Locator',
    'NavigationInfo',
    'ReferenceValue',
    'RemoteValue',
    'ResultOwnership',
    'UserPromptInfo',
    # Filters
    'FilterBy',
    'all_of',
    # Errors
    'BidiError',
    'CommandTimeoutError',
    'DeserializationError',
    'InspectorClosedError',
    'NoSuchElementError',
    'ProtocolError',
    'ScriptError',
    'TransportError',
    'UnsubscribeError',
    # Config
    'ClientConfig',
    'load_config',
    # Version
    '__version__'
]
