"""Shared fixtures: an in-memory ProtocolChannel."""

import asyncio
import copy
from typing import Any, Dict, List, Optional, Tuple

import pytest

from bidi_inspector.services.protocol_channel import ProtocolChannel


class FakeChannel(ProtocolChannel):
    """ProtocolChannel that records commands and returns canned responses.

    ``responses`` maps a method to a result dict, an exception instance to
    raise, or a callable taking the params and returning either.
    """

    def __init__(self):
        super().__init__()
        self.sent: List[Tuple[str, Dict[str, Any]]] = []
        self.responses: Dict[str, Any] = {}

    async def send(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        params = params or {}
        self.sent.append((method, copy.deepcopy(params)))
        # Let other tasks run, like a real round trip would
        await asyncio.sleep(0)

        response = self.responses.get(method, {})
        if callable(response) and not isinstance(response, Exception):
            response = response(params)
        if isinstance(response, Exception):
            raise response
        return copy.deepcopy(response)

    def emit(self, method: str, params: Dict[str, Any]) -> None:
        self.dispatch_event(method, params)

    def commands(self, method: str) -> List[Dict[str, Any]]:
        return [params for sent_method, params in self.sent if sent_method == method]


@pytest.fixture
def channel():
    return FakeChannel()


def console_log_event(text: str = "Hello, world!", level: str = "info", **extra) -> Dict[str, Any]:
    event = {
        "type": "console",
        "level": level,
        "source": {"realm": None, "context": "ctx-1"},
        "text": text,
        "timestamp": 1700000000000,
        "method": "log",
        "args": [{"type": "string", "value": text}],
    }
    event.update(extra)
    return event


def javascript_error_event(text: str = "Error: Not working", level: str = "error") -> Dict[str, Any]:
    return {
        "type": "javascript",
        "level": level,
        "source": {"realm": "realm-1", "context": "ctx-1"},
        "text": text,
        "timestamp": 1700000000001,
        "stackTrace": {
            "callFrames": [
                {
                    "functionName": "createError",
                    "url": "http://localhost/bidi/logEntryAdded.html",
                    "lineNumber": 21,
                    "columnNumber": 10,
                },
                {
                    "functionName": "",
                    "url": "http://localhost/bidi/logEntryAdded.html",
                    "lineNumber": 30,
                    "columnNumber": 4,
                },
            ]
        },
    }


def node_value(shared_id: str, local_name: str = "div", handle: Optional[str] = None, **attributes) -> Dict[str, Any]:
    node = {
        "type": "node",
        "sharedId": shared_id,
        "value": {
            "nodeType": 1,
            "localName": local_name,
            "namespaceURI": "http://www.w3.org/1999/xhtml",
            "childNodeCount": 0,
            "attributes": attributes,
        },
    }
    if handle is not None:
        node["handle"] = handle
    return node


