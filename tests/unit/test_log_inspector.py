"""Unit tests for LogInspector and log entry deserialization."""

import pytest
from conftest import console_log_event, javascript_error_event, node_value

from bidi_inspector.errors import DeserializationError
from bidi_inspector.filters import FilterBy
from bidi_inspector.models import LogEntry, LogLevel, LogType
from bidi_inspector.services.log_inspector import LOG_ENTRY_ADDED, LogInspector


@pytest.fixture
def inspector(channel):
    return LogInspector(channel)


class TestLogEntry:
    """LogEntry.from_event."""

    def test_console_entry(self):
        entry = LogEntry.from_event(console_log_event())

        assert entry.text == "Hello, world!"
        assert entry.realm is None
        assert entry.type is LogType.CONSOLE
        assert entry.level is LogLevel.INFO
        assert entry.method == "log"
        assert len(entry.args) == 1
        assert entry.args[0].value == "Hello, world!"
        assert entry.stack_trace is None
        assert entry.browsing_context_id == "ctx-1"

    def test_javascript_entry_has_stack_trace(self):
        entry = LogEntry.from_event(javascript_error_event())

        assert entry.type is LogType.JAVASCRIPT
        assert entry.level is LogLevel.ERROR
        assert entry.text == "Error: Not working"
        assert entry.method is None
        assert entry.args == ()
        assert entry.realm == "realm-1"
        assert len(entry.stack_trace.call_frames) == 2
        assert entry.stack_trace.call_frames[0].function_name == "createError"
        assert entry.stack_trace.call_frames[0].line_number == 21

    def test_console_entry_ignores_stack_trace(self):
        event = console_log_event(stackTrace={"callFrames": []})

        assert LogEntry.from_event(event).stack_trace is None

    def test_warn_level_is_normalized(self):
        entry = LogEntry.from_event(console_log_event(level="warn"))

        assert entry.level is LogLevel.WARNING

    def test_null_text_becomes_empty(self):
        entry = LogEntry.from_event(console_log_event(text=None))

        assert entry.text == ""

    def test_unknown_type_is_rejected(self):
        with pytest.raises(DeserializationError):
            LogEntry.from_event({"type": "network", "level": "info"})

    def test_to_dict(self):
        data = LogEntry.from_event(javascript_error_event()).to_dict()

        assert data["type"] == "javascript"
        assert data["level"] == "error"
        assert data["stackTrace"][0]["functionName"] == "createError"
        assert "method" not in data


class TestLogInspector:
    """Category-scoped registration helpers."""

    @pytest.mark.asyncio
    async def test_console_entry(self, channel, inspector):
        received = []
        await inspector.on_console_entry(received.append)

        channel.emit(LOG_ENTRY_ADDED, console_log_event())
        channel.emit(LOG_ENTRY_ADDED, javascript_error_event())

        assert len(received) == 1
        assert received[0].text == "Hello, world!"
        assert received[0].method == "log"

    @pytest.mark.asyncio
    async def test_console_entry_with_different_consumers(self, channel, inspector):
        entries, texts = [], []
        await inspector.on_console_entry(entries.append)
        await inspector.on_console_entry(lambda entry: texts.append(entry.text))

        channel.emit(LOG_ENTRY_ADDED, console_log_event())

        assert entries[0].level is LogLevel.INFO
        assert texts == ["Hello, world!"]

    @pytest.mark.asyncio
    async def test_console_entry_level_filter(self, channel, inspector):
        received = []
        await inspector.on_console_entry(received.append, FilterBy.log_level("info"))

        channel.emit(LOG_ENTRY_ADDED, console_log_event(level="debug"))
        channel.emit(LOG_ENTRY_ADDED, console_log_event(text="shown"))

        assert [entry.text for entry in received] == ["shown"]

    @pytest.mark.asyncio
    async def test_javascript_log(self, channel, inspector):
        received = []
        await inspector.on_javascript_log(received.append)

        channel.emit(LOG_ENTRY_ADDED, console_log_event())
        channel.emit(LOG_ENTRY_ADDED, javascript_error_event())
        channel.emit(LOG_ENTRY_ADDED, javascript_error_event(text="minor", level="warn"))

        assert [entry.text for entry in received] == ["Error: Not working", "minor"]

    @pytest.mark.asyncio
    async def test_javascript_log_error_filter(self, channel, inspector):
        received = []
        await inspector.on_javascript_log(received.append, FilterBy.log_level("error"))

        channel.emit(LOG_ENTRY_ADDED, javascript_error_event(text="minor", level="warn"))
        channel.emit(LOG_ENTRY_ADDED, javascript_error_event())

        assert [entry.text for entry in received] == ["Error: Not working"]

    @pytest.mark.asyncio
    async def test_javascript_exception_only_errors(self, channel, inspector):
        received = []
        await inspector.on_javascript_exception(received.append)

        channel.emit(LOG_ENTRY_ADDED, javascript_error_event(text="minor", level="warn"))
        channel.emit(LOG_ENTRY_ADDED, console_log_event(level="error"))
        channel.emit(LOG_ENTRY_ADDED, javascript_error_event())

        assert len(received) == 1
        assert received[0].type is LogType.JAVASCRIPT
        assert received[0].stack_trace is not None
        assert len(received[0].stack_trace.call_frames) > 0

    @pytest.mark.asyncio
    async def test_any_log(self, channel, inspector):
        received = []
        await inspector.on_log(received.append)

        channel.emit(LOG_ENTRY_ADDED, console_log_event())
        channel.emit(LOG_ENTRY_ADDED, javascript_error_event())

        assert [entry.type for entry in received] == [LogType.CONSOLE, LogType.JAVASCRIPT]

    @pytest.mark.asyncio
    async def test_any_log_filter_applies_to_both_kinds(self, channel, inspector):
        infos, errors = [], []
        await inspector.on_log(infos.append, FilterBy.log_level("info"))
        await inspector.on_log(errors.append, FilterBy.log_level("error"))

        channel.emit(LOG_ENTRY_ADDED, console_log_event())
        channel.emit(LOG_ENTRY_ADDED, javascript_error_event())

        assert [entry.text for entry in infos] == ["Hello, world!"]
        assert [entry.text for entry in errors] == ["Error: Not working"]

    @pytest.mark.asyncio
    async def test_all_helpers_share_one_subscription(self, channel, inspector):
        await inspector.on_console_entry(lambda entry: None)
        await inspector.on_javascript_log(lambda entry: None)
        await inspector.on_javascript_exception(lambda entry: None)
        await inspector.on_log(lambda entry: None)

        assert channel.commands("session.subscribe") == [{"events": [LOG_ENTRY_ADDED]}]
        assert channel.handler_count(LOG_ENTRY_ADDED) == 1

    @pytest.mark.asyncio
    async def test_context_scoped_inspector(self, channel):
        inspector = LogInspector(channel, browsing_context_ids=["ctx-1", "ctx-2"])

        await inspector.on_log(lambda entry: None)

        assert channel.commands("session.subscribe") == [
            {"events": [LOG_ENTRY_ADDED], "contexts": ["ctx-1", "ctx-2"]}
        ]

    @pytest.mark.asyncio
    async def test_console_entry_with_map_keyed_by_node(self, channel, inspector):
        received = []
        await inspector.on_console_entry(received.append)
        node_map = {
            "type": "map",
            "value": [[node_value("n-1", "body"), {"type": "number", "value": 1}]],
        }

        channel.emit(LOG_ENTRY_ADDED, console_log_event(args=[node_map]))

        assert len(received) == 1
        (key,) = received[0].args[0].value
        assert key.shared_id == "n-1"

    @pytest.mark.asyncio
    async def test_close_stops_delivery(self, channel, inspector):
        received = []
        await inspector.on_log(received.append)

        await inspector.close()
        channel.emit(LOG_ENTRY_ADDED, console_log_event())

        assert received == []
        assert channel.commands("session.unsubscribe") == [{"events": [LOG_ENTRY_ADDED]}]
