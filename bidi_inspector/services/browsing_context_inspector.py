"""Browsing context inspector: context lifecycle, navigation and prompts."""

from typing import Any, Callable, Optional, Sequence

from ..models import BrowsingContextInfo, NavigationInfo, UserPromptInfo
from .event_inspector import EventInspector
from .protocol_channel import ProtocolChannel

CONTEXT_CREATED = "browsingContext.contextCreated"
CONTEXT_DESTROYED = "browsingContext.contextDestroyed"
DOM_CONTENT_LOADED = "browsingContext.domContentLoaded"
LOAD = "browsingContext.load"
NAVIGATION_STARTED = "browsingContext.navigationStarted"
FRAGMENT_NAVIGATED = "browsingContext.fragmentNavigated"
USER_PROMPT_OPENED = "browsingContext.userPromptOpened"
USER_PROMPT_CLOSED = "browsingContext.userPromptClosed"

DESERIALIZERS = {
    CONTEXT_CREATED: BrowsingContextInfo.from_dict,
    CONTEXT_DESTROYED: BrowsingContextInfo.from_dict,
    DOM_CONTENT_LOADED: NavigationInfo.from_dict,
    LOAD: NavigationInfo.from_dict,
    NAVIGATION_STARTED: NavigationInfo.from_dict,
    FRAGMENT_NAVIGATED: NavigationInfo.from_dict,
    USER_PROMPT_OPENED: UserPromptInfo.from_dict,
    USER_PROMPT_CLOSED: UserPromptInfo.from_dict,
}


class BrowsingContextInspector(EventInspector):
    """Listen to browsing context events. Registrations take no filter."""

    def __init__(
        self,
        channel: ProtocolChannel,
        browsing_context_ids: Optional[Sequence[str]] = None,
    ):
        super().__init__(channel, DESERIALIZERS, browsing_context_ids=browsing_context_ids)

    async def on_browsing_context_created(
        self, callback: Callable[[BrowsingContextInfo], Any]
    ) -> None:
        await self.on(CONTEXT_CREATED, callback)

    async def on_browsing_context_destroyed(
        self, callback: Callable[[BrowsingContextInfo], Any]
    ) -> None:
        await self.on(CONTEXT_DESTROYED, callback)

    async def on_dom_content_loaded(self, callback: Callable[[NavigationInfo], Any]) -> None:
        await self.on(DOM_CONTENT_LOADED, callback)

    async def on_browsing_context_loaded(
        self, callback: Callable[[NavigationInfo], Any]
    ) -> None:
        await self.on(LOAD, callback)

    async def on_navigation_started(self, callback: Callable[[NavigationInfo], Any]) -> None:
        await self.on(NAVIGATION_STARTED, callback)

    async def on_fragment_navigated(self, callback: Callable[[NavigationInfo], Any]) -> None:
        await self.on(FRAGMENT_NAVIGATED, callback)

    async def on_user_prompt_opened(self, callback: Callable[[UserPromptInfo], Any]) -> None:
        await self.on(USER_PROMPT_OPENED, callback)

    async def on_user_prompt_closed(self, callback: Callable[[UserPromptInfo], Any]) -> None:
        await self.on(USER_PROMPT_CLOSED, callback)
