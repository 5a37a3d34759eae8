"""Data models for bidi-inspector."""

from .browsing_context import (
    BrowsingContextInfo,
    NavigationInfo,
    NavigationResult,
    UserPromptInfo,
)
from .evaluate_result import EvaluateResult, EvaluateResultType, ExceptionDetails
from .locator import InnerTextMatchType, Locator, ResultOwnership
from .log_entry import CallFrame, LogEntry, LogLevel, LogType, StackTrace
from .remote_value import (
    NodeProperties,
    ReferenceValue,
    RegExpValue,
    RemoteValue,
    serialize_local_value,
)

__all__ = [
    'BrowsingContextInfo',
    'CallFrame',
    'EvaluateResult',
    'EvaluateResultType',
    'ExceptionDetails',
    'InnerTextMatchType',
    'Locator',
    'LogEntry',
    'LogLevel',
    'LogType',
    'NavigationInfo',
    'NavigationResult',
    'NodeProperties',
    'ReferenceValue',
    'RegExpValue',
    'RemoteValue',
    'ResultOwnership',
    'StackTrace',
    'UserPromptInfo',
    'serialize_local_value',
]
