"""Generic subscribe/fan-out engine for protocol events.

Each inspector owns, per event category:

- at most one wire subscription (``session.subscribe``), created by the first
  registration and released by ``close()``;
- exactly one low-level handler on the channel;
- an ordered list of (callback, filter) registrations.

An incoming event is deserialized once and offered to every registration in
registration order. A failing filter or callback is logged and skipped; it
never stops delivery to the remaining registrations.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Set

from ..errors import InspectorClosedError, UnsubscribeError
from ..filters import Filter, FilterSpec, compose_filters
from .protocol_channel import ProtocolChannel

logger = logging.getLogger(__name__)

Deserializer = Callable[[Dict[str, Any]], Any]
Callback = Callable[[Any], Any]


@dataclass
class Registration:
    callback: Callback
    filter: Optional[Filter] = None

    def accepts(self, value: Any) -> bool:
        return self.filter is None or bool(self.filter(value))


@dataclass
class _Subscription:
    handler: Callable[[Dict[str, Any]], None]
    subscription_id: Optional[str] = None


class EventInspector:
    """Subscribe to a closed set of event categories and fan events out.

    Example:
        inspector = EventInspector(channel, {"log.entryAdded": LogEntry.from_event})
        await inspector.on("log.entryAdded", print, FilterBy.log_level("error"))
        ...
        await inspector.close()
    """

    def __init__(
        self,
        channel: ProtocolChannel,
        deserializers: Mapping[str, Deserializer],
        browsing_context_ids: Optional[Sequence[str]] = None,
    ):
        """Initialize the inspector.

        Args:
            channel: Channel used for subscribe/unsubscribe and event delivery
            deserializers: Supported categories mapped to payload deserializers
            browsing_context_ids: Optional contexts to scope subscriptions to
        """
        if not deserializers:
            raise ValueError("An inspector needs at least one event category")

        self.channel = channel
        self.browsing_context_ids = (
            list(browsing_context_ids) if browsing_context_ids else None
        )
        self._deserializers: Dict[str, Deserializer] = dict(deserializers)
        self._registrations: Dict[str, List[Registration]] = {}
        self._subscriptions: Dict[str, _Subscription] = {}
        self._tasks: Set[asyncio.Task] = set()
        self._lock = asyncio.Lock()
        self._closed = False

    @property
    def categories(self) -> Set[str]:
        return set(self._deserializers)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscribed_categories(self) -> Set[str]:
        return set(self._subscriptions)

    def registration_count(self, category: str) -> int:
        return len(self._registrations.get(category, ()))

    async def on(
        self, category: str, callback: Callback, filter_by: FilterSpec = None
    ) -> None:
        """Register a callback for an event category.

        The first registration for a category subscribes on the wire; this
        call returns once that subscription is acknowledged.

        Args:
            category: Event method name (must be one this inspector supports)
            callback: Called with the deserialized value; coroutine functions
                are scheduled as separate tasks
            filter_by: Optional predicate, or several predicates combined with AND

        Raises:
            ValueError: If the category is not supported
            InspectorClosedError: If the inspector was closed
            ProtocolError: If the remote end rejects the subscription
        """
        if category not in self._deserializers:
            supported = ", ".join(sorted(self._deserializers))
            raise ValueError(
                f"Unsupported event category {category!r}, expected one of: {supported}"
            )
        if not callable(callback):
            raise TypeError("callback must be callable")

        registration = Registration(callback, compose_filters(filter_by))

        async with self._lock:
            if self._closed:
                raise InspectorClosedError("Inspector is closed")
            # Registered before subscribing: events may arrive ahead of the ack
            registrations = self._registrations.setdefault(category, [])
            registrations.append(registration)
            if category not in self._subscriptions:
                try:
                    await self._subscribe(category)
                except BaseException:
                    registrations.remove(registration)
                    if not registrations:
                        del self._registrations[category]
                    raise

        logger.debug(
            f"Registered callback on {category} "
            f"({self.registration_count(category)} registration(s))"
        )

    async def close(self) -> None:
        """Unregister everything and release this inspector's wire subscriptions.

        Safe to call more than once. Every category is unsubscribed even if
        some fail.

        Raises:
            UnsubscribeError: If one or more unsubscribe commands failed
        """
        async with self._lock:
            if self._closed:
                return
            self._closed = True

            subscriptions = self._subscriptions
            self._subscriptions = {}
            self._registrations.clear()

            for category, subscription in subscriptions.items():
                self.channel.off_event(category, subscription.handler)

            failures = []
            for category, subscription in subscriptions.items():
                try:
                    await self._unsubscribe(category, subscription)
                except Exception as e:
                    logger.warning(f"Failed to unsubscribe from {category}: {e}")
                    failures.append((category, e))

        logger.info(f"Inspector closed ({len(subscriptions)} subscription(s) released)")
        if failures:
            raise UnsubscribeError(failures)

    async def __aenter__(self) -> "EventInspector":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _subscribe(self, category: str) -> None:
        def handler(params: Dict[str, Any]) -> None:
            self._dispatch(category, params)

        # Attached before subscribing, the remote end may emit before it acks
        self.channel.on_event(category, handler)

        params: Dict[str, Any] = {"events": [category]}
        if self.browsing_context_ids:
            params["contexts"] = self.browsing_context_ids

        try:
            result = await self.channel.send("session.subscribe", params)
        except BaseException:
            self.channel.off_event(category, handler)
            raise

        self._subscriptions[category] = _Subscription(
            handler=handler, subscription_id=(result or {}).get("subscription")
        )
        logger.info(f"Subscribed to {category}")

    async def _unsubscribe(self, category: str, subscription: _Subscription) -> None:
        if subscription.subscription_id is not None:
            params: Dict[str, Any] = {"subscriptions": [subscription.subscription_id]}
        else:
            params = {"events": [category]}
            if self.browsing_context_ids:
                params["contexts"] = self.browsing_context_ids

        await self.channel.send("session.unsubscribe", params)
        logger.debug(f"Unsubscribed from {category}")

    def _dispatch(self, category: str, params: Dict[str, Any]) -> None:
        registrations = self._registrations.get(category)
        if not registrations:
            return

        try:
            value = self._deserializers[category](params)
        except Exception as e:
            logger.error(f"Dropping malformed {category} event: {e}")
            return

        # Snapshot so callbacks registering more consumers don't see this event
        for registration in list(registrations):
            try:
                if not registration.accepts(value):
                    continue
                result = registration.callback(value)
                if inspect.isawaitable(result):
                    self._track(asyncio.ensure_future(result), category)
            except Exception as e:
                logger.error(f"Error in {category} callback: {e}")

    def _track(self, task: asyncio.Future, category: str) -> None:
        self._tasks.add(task)

        def done(finished: asyncio.Future) -> None:
            self._tasks.discard(finished)
            if finished.cancelled():
                return
            error = finished.exception()
            if error is not None:
                logger.error(f"Error in {category} callback: {error}")

        task.add_done_callback(done)
