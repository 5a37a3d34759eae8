"""Script commands: evaluate, callFunction, disown."""

import logging
from typing import Any, Dict, Iterable, Optional, Sequence

from ..models import EvaluateResult, ResultOwnership, serialize_local_value
from .protocol_channel import ProtocolChannel

logger = logging.getLogger(__name__)


def _target(context_id: str, sandbox: Optional[str]) -> Dict[str, str]:
    target = {"context": context_id}
    if sandbox is not None:
        target["sandbox"] = sandbox
    return target


class ScriptManager:
    """Run scripts in a browsing context's realms.

    Values created inside a sandbox are only reachable from later calls that
    name the same sandbox.
    """

    def __init__(self, channel: ProtocolChannel):
        self.channel = channel

    async def evaluate(
        self,
        context_id: str,
        expression: str,
        await_promise: bool = False,
        result_ownership: Optional[str] = None,
        sandbox: Optional[str] = None,
    ) -> EvaluateResult:
        """Evaluate an expression.

        Args:
            context_id: Browsing context to evaluate in
            expression: Script source
            await_promise: Wait for a returned promise to settle
            result_ownership: "none" or "root"
            sandbox: Optional sandbox name

        Returns:
            EvaluateResult (success or exception)
        """
        params: Dict[str, Any] = {
            "expression": expression,
            "target": _target(context_id, sandbox),
            "awaitPromise": await_promise,
        }
        if result_ownership is not None:
            params["resultOwnership"] = ResultOwnership(result_ownership).value

        result = await self.channel.send("script.evaluate", params)
        return EvaluateResult.from_dict(result)

    async def call_function(
        self,
        context_id: str,
        function_declaration: str,
        await_promise: bool = False,
        arguments: Optional[Sequence[Any]] = None,
        this: Any = None,
        result_ownership: Optional[str] = None,
        sandbox: Optional[str] = None,
    ) -> EvaluateResult:
        """Call a function declaration with serialized arguments.

        Arguments may be plain Python values, ReferenceValue objects or
        RemoteValue objects with a sharedId/handle.
        """
        params: Dict[str, Any] = {
            "functionDeclaration": function_declaration,
            "target": _target(context_id, sandbox),
            "awaitPromise": await_promise,
        }
        if arguments:
            params["arguments"] = [serialize_local_value(arg) for arg in arguments]
        if this is not None:
            params["this"] = serialize_local_value(this)
        if result_ownership is not None:
            params["resultOwnership"] = ResultOwnership(result_ownership).value

        result = await self.channel.send("script.callFunction", params)
        return EvaluateResult.from_dict(result)

    async def disown(
        self, context_id: str, handles: Iterable[str], sandbox: Optional[str] = None
    ) -> None:
        """Release handles obtained with root ownership."""
        handles = list(handles)
        if not handles:
            return
        await self.channel.send(
            "script.disown",
            {"handles": handles, "target": _target(context_id, sandbox)},
        )
        logger.debug(f"Disowned {len(handles)} handle(s) in {context_id}")
