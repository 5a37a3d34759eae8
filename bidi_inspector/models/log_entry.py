"""Log entry model for log.entryAdded events."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from ..errors import DeserializationError
from .remote_value import RemoteValue


class LogLevel(Enum):
    """Log levels reported by the remote end."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def _missing_(cls, value):
        # The protocol spells it "warn"
        if value == "warn":
            return cls.WARNING
        return None


class LogType(Enum):
    CONSOLE = "console"
    JAVASCRIPT = "javascript"


@dataclass(frozen=True)
class CallFrame:
    function_name: str
    url: str
    line_number: int
    column_number: int

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "CallFrame":
        return cls(
            function_name=raw.get("functionName", ""),
            url=raw.get("url", ""),
            line_number=raw.get("lineNumber", 0),
            column_number=raw.get("columnNumber", 0),
        )


@dataclass(frozen=True)
class StackTrace:
    call_frames: Tuple[CallFrame, ...] = ()

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "StackTrace":
        return cls(
            call_frames=tuple(
                CallFrame.from_dict(frame) for frame in raw.get("callFrames", ())
            )
        )


@dataclass(frozen=True)
class LogEntry:
    """A console or javascript log entry.

    ``method`` and ``args`` are only set for console entries, ``stack_trace``
    only for javascript entries.
    """

    type: LogType
    level: LogLevel
    text: str
    timestamp: int
    method: Optional[str] = None
    args: Tuple[RemoteValue, ...] = ()
    stack_trace: Optional[StackTrace] = None
    realm: Optional[str] = None
    browsing_context_id: Optional[str] = None

    @classmethod
    def from_event(cls, params: Mapping[str, Any]) -> "LogEntry":
        """Build a LogEntry from log.entryAdded event params.

        Args:
            params: Raw event params

        Returns:
            LogEntry instance

        Raises:
            DeserializationError: If the params are missing required fields
        """
        try:
            entry_type = LogType(params["type"])
            level = LogLevel(params["level"])
        except (KeyError, ValueError) as e:
            raise DeserializationError(f"Invalid log entry: {e}") from e

        source = params.get("source") or {}
        method = None
        args: Tuple[RemoteValue, ...] = ()
        stack_trace = None

        if entry_type is LogType.CONSOLE:
            method = params.get("method")
            args = tuple(RemoteValue.from_dict(arg) for arg in params.get("args", ()))
        elif params.get("stackTrace") is not None:
            stack_trace = StackTrace.from_dict(params["stackTrace"])

        return cls(
            type=entry_type,
            level=level,
            # text is nullable on the wire
            text=params.get("text") or "",
            timestamp=params.get("timestamp", 0),
            method=method,
            args=args,
            stack_trace=stack_trace,
            realm=source.get("realm"),
            browsing_context_id=source.get("context"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        data: Dict[str, Any] = {
            "type": self.type.value,
            "level": self.level.value,
            "text": self.text,
            "timestamp": self.timestamp,
            "realm": self.realm,
            "browsingContextId": self.browsing_context_id,
        }
        if self.type is LogType.CONSOLE:
            data["method"] = self.method
            data["argCount"] = len(self.args)
        if self.stack_trace is not None:
            data["stackTrace"] = [
                {
                    "functionName": frame.function_name,
                    "url": frame.url,
                    "lineNumber": frame.line_number,
                    "columnNumber": frame.column_number,
                }
                for frame in self.stack_trace.call_frames
            ]
        return data
