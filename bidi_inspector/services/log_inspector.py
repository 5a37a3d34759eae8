"""Log inspector: console and javascript log entries."""

from typing import Any, Callable, Optional, Sequence

from ..filters import FilterBy, FilterSpec, compose_filters
from ..models import LogEntry, LogLevel, LogType
from .event_inspector import EventInspector
from .protocol_channel import ProtocolChannel

LOG_ENTRY_ADDED = "log.entryAdded"

_CONSOLE = FilterBy.log_type(LogType.CONSOLE)
_JAVASCRIPT = FilterBy.log_type(LogType.JAVASCRIPT)
_ERROR = FilterBy.log_level(LogLevel.ERROR)


class LogInspector(EventInspector):
    """Listen to log entries, optionally restricted to some browsing contexts.

    All four ``on_*`` methods share the single ``log.entryAdded``
    subscription; they differ only in the entry kinds they let through.
    Filters are evaluated against LogEntry, so ``level`` and ``text`` work
    for both kinds.
    """

    def __init__(
        self,
        channel: ProtocolChannel,
        browsing_context_ids: Optional[Sequence[str]] = None,
    ):
        super().__init__(
            channel,
            {LOG_ENTRY_ADDED: LogEntry.from_event},
            browsing_context_ids=browsing_context_ids,
        )

    async def on_console_entry(
        self, callback: Callable[[LogEntry], Any], filter_by: FilterSpec = None
    ) -> None:
        """Receive console API entries (console.log, console.error, ...)."""
        await self._on_log_kind(callback, [_CONSOLE], filter_by)

    async def on_javascript_log(
        self, callback: Callable[[LogEntry], Any], filter_by: FilterSpec = None
    ) -> None:
        """Receive javascript entries at any level."""
        await self._on_log_kind(callback, [_JAVASCRIPT], filter_by)

    async def on_javascript_exception(
        self, callback: Callable[[LogEntry], Any], filter_by: FilterSpec = None
    ) -> None:
        """Receive uncaught script errors (javascript entries at level error)."""
        await self._on_log_kind(callback, [_JAVASCRIPT, _ERROR], filter_by)

    async def on_log(
        self, callback: Callable[[LogEntry], Any], filter_by: FilterSpec = None
    ) -> None:
        """Receive every log entry, console or javascript."""
        await self._on_log_kind(callback, [], filter_by)

    async def _on_log_kind(self, callback, kind_filters, filter_by: FilterSpec) -> None:
        user_filter = compose_filters(filter_by)
        filters = list(kind_filters)
        if user_filter is not None:
            filters.append(user_filter)
        await self.on(LOG_ENTRY_ADDED, callback, filters)
