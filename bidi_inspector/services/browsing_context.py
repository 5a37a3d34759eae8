"""Browsing context commands, including node location.

``locate_nodes`` is the core: it turns a Locator plus result-shaping options
into one ``browsingContext.locateNodes`` command and returns the nodes in the
order the remote end found them. The single-node and element variants are
built on top of it.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ..errors import NoSuchElementError, ScriptError
from ..models import (
    BrowsingContextInfo,
    Locator,
    NavigationResult,
    ReferenceValue,
    RemoteValue,
    ResultOwnership,
)
from .protocol_channel import ProtocolChannel
from .script import ScriptManager

logger = logging.getLogger(__name__)

ReadinessState = str  # "none", "interactive" or "complete"
StartNode = Union[RemoteValue, ReferenceValue]


class RemoteElement:
    """Element handle resolved from a located node by its sharedId.

    Interaction goes through ``script.callFunction`` with the node passed as
    a shared reference.
    """

    def __init__(self, context: "BrowsingContext", node: RemoteValue):
        if node.shared_id is None:
            raise ValueError("Located node has no sharedId")
        self.context = context
        self.node = node

    @property
    def shared_id(self) -> str:
        return self.node.shared_id

    def __repr__(self) -> str:
        return f"RemoteElement(context={self.context.id!r}, shared_id={self.shared_id!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RemoteElement):
            return NotImplemented
        return self.context.id == other.context.id and self.shared_id == other.shared_id

    def __hash__(self) -> int:
        return hash((self.context.id, self.shared_id))

    async def _call(self, function_declaration: str) -> Any:
        result = await self.context.script.call_function(
            self.context.id,
            function_declaration,
            await_promise=True,
            arguments=[ReferenceValue(shared_id=self.shared_id)],
        )
        if not result.is_success:
            details = result.exception_details
            raise ScriptError(f"Script failed on element {self.shared_id}: {details.text}")
        return result.result.value

    async def click(self) -> None:
        await self._call("(element) => { element.click(); }")

    async def get_text(self) -> str:
        return await self._call("(element) => element.innerText") or ""


ElementFactory = Callable[["BrowsingContext", RemoteValue], Any]


class BrowsingContext:
    """Commands scoped to one browsing context (tab, window or frame).

    Usage:
        context = BrowsingContext(channel, context_id)
        nodes = await context.locate_nodes(Locator.css("div"), max_node_count=4)
        element = await context.locate_element(Locator.css("p"))
        text = await element.get_text()
    """

    def __init__(
        self,
        channel: ProtocolChannel,
        context_id: str,
        element_factory: Optional[ElementFactory] = None,
    ):
        """Initialize browsing context.

        Args:
            channel: Protocol channel
            context_id: Opaque browsing context id
            element_factory: Turns a located node into an element handle
                (default: RemoteElement)
        """
        if not context_id:
            raise ValueError("context_id is required")
        self.channel = channel
        self.id = context_id
        self.script = ScriptManager(channel)
        self.element_factory = element_factory or RemoteElement

    def __repr__(self) -> str:
        return f"BrowsingContext({self.id!r})"

    @classmethod
    async def create(
        cls,
        channel: ProtocolChannel,
        context_type: str = "tab",
        reference_context: Optional[str] = None,
        background: bool = False,
    ) -> "BrowsingContext":
        """Open a new tab or window and wrap it."""
        if context_type not in ("tab", "window"):
            raise ValueError(f"context_type must be 'tab' or 'window', got {context_type!r}")

        params: Dict[str, Any] = {"type": context_type}
        if reference_context is not None:
            params["referenceContext"] = reference_context
        if background:
            params["background"] = True

        result = await channel.send("browsingContext.create", params)
        logger.info(f"Created browsing context {result['context']}")
        return cls(channel, result["context"])

    async def locate_nodes(
        self,
        locator: Locator,
        max_node_count: Optional[int] = None,
        ownership: Optional[Union[str, ResultOwnership]] = None,
        sandbox: Optional[str] = None,
        serialization_options: Optional[Dict[str, Any]] = None,
        start_nodes: Optional[Sequence[StartNode]] = None,
    ) -> List[RemoteValue]:
        """Locate nodes in this context.

        Optional parameters are only sent when given, so remote defaults
        apply otherwise (no node count cap, ``none`` ownership, the main
        realm, the whole document).

        Args:
            locator: What to look for
            max_node_count: Stop after this many matches (positive int)
            ownership: "none" or "root"; with "root" each node has a handle
            sandbox: Resolve nodes in this sandbox realm
            serialization_options: Protocol serialization options
            start_nodes: Only search below these nodes

        Returns:
            Located nodes, in the remote end's order

        Raises:
            ValueError: If max_node_count or ownership is invalid
            ProtocolError: If the remote end rejects the command
        """
        if not isinstance(locator, Locator):
            raise TypeError(f"locator must be a Locator, got {type(locator).__name__}")

        params: Dict[str, Any] = {"context": self.id, "locator": locator.to_dict()}

        if max_node_count is not None:
            if (
                isinstance(max_node_count, bool)
                or not isinstance(max_node_count, int)
                or max_node_count < 1
            ):
                raise ValueError(
                    f"max_node_count must be a positive integer, got {max_node_count!r}"
                )
            params["maxNodeCount"] = max_node_count
        if ownership is not None:
            params["ownership"] = ResultOwnership(ownership).value
        if sandbox is not None:
            params["sandbox"] = sandbox
        if serialization_options is not None:
            params["serializationOptions"] = dict(serialization_options)
        if start_nodes is not None:
            params["startNodes"] = [_reference(node).to_dict() for node in start_nodes]

        result = await self.channel.send("browsingContext.locateNodes", params)
        nodes = [RemoteValue.from_dict(node) for node in result.get("nodes", ())]
        logger.debug(f"Located {len(nodes)} node(s) with {locator.type} in {self.id}")
        return nodes

    async def locate_node(
        self,
        locator: Locator,
        ownership: Optional[Union[str, ResultOwnership]] = None,
        sandbox: Optional[str] = None,
        serialization_options: Optional[Dict[str, Any]] = None,
        start_nodes: Optional[Sequence[StartNode]] = None,
    ) -> RemoteValue:
        """Locate the first matching node.

        Raises:
            NoSuchElementError: If nothing matches
        """
        nodes = await self.locate_nodes(
            locator,
            max_node_count=1,
            ownership=ownership,
            sandbox=sandbox,
            serialization_options=serialization_options,
            start_nodes=start_nodes,
        )
        if not nodes:
            raise NoSuchElementError(locator, self.id)
        return nodes[0]

    async def locate_element(
        self,
        locator: Locator,
        ownership: Optional[Union[str, ResultOwnership]] = None,
        sandbox: Optional[str] = None,
        serialization_options: Optional[Dict[str, Any]] = None,
        start_nodes: Optional[Sequence[StartNode]] = None,
    ) -> Any:
        """Locate the first matching node as an element handle.

        Options are the same as for ``locate_nodes``.

        Raises:
            NoSuchElementError: If nothing matches
        """
        node = await self.locate_node(
            locator,
            ownership=ownership,
            sandbox=sandbox,
            serialization_options=serialization_options,
            start_nodes=start_nodes,
        )
        return self.element_factory(self, node)

    async def locate_elements(
        self,
        locator: Locator,
        max_node_count: Optional[int] = None,
        ownership: Optional[Union[str, ResultOwnership]] = None,
        sandbox: Optional[str] = None,
        serialization_options: Optional[Dict[str, Any]] = None,
        start_nodes: Optional[Sequence[StartNode]] = None,
    ) -> List[Any]:
        """Locate matching nodes as element handles, in order."""
        nodes = await self.locate_nodes(
            locator,
            max_node_count=max_node_count,
            ownership=ownership,
            sandbox=sandbox,
            serialization_options=serialization_options,
            start_nodes=start_nodes,
        )
        return [self.element_factory(self, node) for node in nodes]

    async def navigate(self, url: str, wait: Optional[ReadinessState] = None) -> NavigationResult:
        """Navigate to ``url``, optionally waiting for a readiness state."""
        params: Dict[str, Any] = {"context": self.id, "url": url}
        if wait is not None:
            params["wait"] = wait
        result = await self.channel.send("browsingContext.navigate", params)
        logger.info(f"Navigated {self.id} to {url}")
        return NavigationResult.from_dict(result)

    async def reload(
        self, ignore_cache: Optional[bool] = None, wait: Optional[ReadinessState] = None
    ) -> NavigationResult:
        params: Dict[str, Any] = {"context": self.id}
        if ignore_cache is not None:
            params["ignoreCache"] = ignore_cache
        if wait is not None:
            params["wait"] = wait
        result = await self.channel.send("browsingContext.reload", params)
        return NavigationResult.from_dict(result)

    async def handle_user_prompt(
        self, accept: Optional[bool] = None, user_text: Optional[str] = None
    ) -> None:
        """Accept or dismiss the open prompt, optionally typing ``user_text``."""
        params: Dict[str, Any] = {"context": self.id}
        if accept is not None:
            params["accept"] = accept
        if user_text is not None:
            params["userText"] = user_text
        await self.channel.send("browsingContext.handleUserPrompt", params)

    async def get_tree(self, max_depth: Optional[int] = None) -> List[BrowsingContextInfo]:
        """Get this context and its descendants, with children populated."""
        params: Dict[str, Any] = {"root": self.id}
        if max_depth is not None:
            params["maxDepth"] = max_depth
        result = await self.channel.send("browsingContext.getTree", params)
        return [BrowsingContextInfo.from_dict(info) for info in result.get("contexts", ())]

    async def close(self) -> None:
        await self.channel.send("browsingContext.close", {"context": self.id})
        logger.info(f"Closed browsing context {self.id}")


def _reference(node: StartNode) -> ReferenceValue:
    if isinstance(node, ReferenceValue):
        return node
    if isinstance(node, RemoteValue):
        return node.to_reference()
    raise TypeError(f"start node must be a RemoteValue or ReferenceValue, got {node!r}")
