"""Exceptions raised by bidi-inspector."""

from typing import Any, Dict, List, Optional, Tuple


class BidiError(Exception):
    """Base class for all bidi-inspector errors."""

    pass


class TransportError(BidiError):
    """Raised when the underlying channel fails (closed socket, bad frame)."""

    pass


class CommandTimeoutError(TransportError):
    """Raised when a command gets no response within the configured timeout."""

    pass


class DeserializationError(BidiError):
    """Raised when a protocol payload cannot be turned into a model."""

    pass


class InspectorClosedError(BidiError):
    """Raised when registering on an inspector that was already closed."""

    pass


class NoSuchElementError(BidiError):
    """Raised when a single-node locate call finds nothing."""

    def __init__(self, locator: Any, context_id: str):
        self.locator = locator
        self.context_id = context_id
        super().__init__(f"No node matching {locator!r} in browsing context {context_id}")


class ProtocolError(BidiError):
    """Structured error returned by the remote end for a command.

    Attributes:
        error: Protocol error code (e.g. "no such frame")
        message: Human readable message from the remote end
        method: Command that failed
        stacktrace: Remote stacktrace, when provided
    """

    def __init__(
        self,
        error: str,
        message: str = "",
        method: Optional[str] = None,
        stacktrace: Optional[str] = None,
    ):
        self.error = error
        self.message = message
        self.method = method
        self.stacktrace = stacktrace
        super().__init__(f"{method or 'command'} failed: {error}: {message}")


class NoSuchFrameError(ProtocolError):
    pass


class NoSuchNodeError(ProtocolError):
    pass


class InvalidArgumentError(ProtocolError):
    pass


class InvalidSelectorError(ProtocolError):
    pass


class UnknownCommandError(ProtocolError):
    pass


_ERROR_CODES = {
    "no such frame": NoSuchFrameError,
    "no such node": NoSuchNodeError,
    "invalid argument": InvalidArgumentError,
    "invalid selector": InvalidSelectorError,
    "unknown command": UnknownCommandError,
}


def protocol_error_from_response(
    response: Dict[str, Any], method: Optional[str] = None
) -> ProtocolError:
    """Build the typed ProtocolError for an error response frame."""
    code = response.get("error", "unknown error")
    error_class = _ERROR_CODES.get(code, ProtocolError)
    return error_class(
        code,
        response.get("message", ""),
        method=method,
        stacktrace=response.get("stacktrace"),
    )


class UnsubscribeError(BidiError):
    """Raised by Inspector.close() when one or more unsubscribes failed.

    Teardown is attempted for every category before this is raised.
    """

    def __init__(self, failures: List[Tuple[str, Exception]]):
        self.failures = failures
        categories = ", ".join(category for category, _ in failures)
        super().__init__(f"Failed to unsubscribe from: {categories}")


class ScriptError(BidiError):
    """Raised when a script run on behalf of the client throws."""

    pass
