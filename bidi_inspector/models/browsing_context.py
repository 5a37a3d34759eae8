"""Browsing context event models."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from ..errors import DeserializationError


@dataclass(frozen=True)
class BrowsingContextInfo:
    """A browsing context (window, tab or frame).

    ``children`` is None unless the producing command asked for the tree;
    ``parent_browsing_context`` is None for top-level contexts.
    """

    id: str
    url: str
    children: Optional[Tuple["BrowsingContextInfo", ...]] = None
    parent_browsing_context: Optional[str] = None
    user_context: Optional[str] = None
    original_opener: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "BrowsingContextInfo":
        try:
            context_id = raw["context"]
        except (KeyError, TypeError) as e:
            raise DeserializationError(f"Invalid browsing context info: {raw!r}") from e

        children = raw.get("children")
        return cls(
            id=context_id,
            url=raw.get("url", ""),
            children=(
                tuple(cls.from_dict(child) for child in children)
                if children is not None
                else None
            ),
            parent_browsing_context=raw.get("parent"),
            user_context=raw.get("userContext"),
            original_opener=raw.get("originalOpener"),
        )


@dataclass(frozen=True)
class NavigationInfo:
    """Payload shared by domContentLoaded, load, navigationStarted and fragmentNavigated."""

    browsing_context_id: str
    url: str
    navigation_id: Optional[str] = None
    timestamp: int = 0

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "NavigationInfo":
        try:
            context_id = raw["context"]
        except (KeyError, TypeError) as e:
            raise DeserializationError(f"Invalid navigation info: {raw!r}") from e

        return cls(
            browsing_context_id=context_id,
            url=raw.get("url", ""),
            navigation_id=raw.get("navigation"),
            timestamp=raw.get("timestamp", 0),
        )


@dataclass(frozen=True)
class UserPromptInfo:
    """User prompt opened/closed event payload.

    ``message`` and ``default_value`` come with the opened event,
    ``accepted`` and ``user_text`` with the closed event.
    """

    browsing_context_id: str
    type: str
    message: Optional[str] = None
    default_value: Optional[str] = None
    accepted: Optional[bool] = None
    user_text: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "UserPromptInfo":
        try:
            context_id = raw["context"]
            prompt_type = raw["type"]
        except (KeyError, TypeError) as e:
            raise DeserializationError(f"Invalid user prompt info: {raw!r}") from e

        return cls(
            browsing_context_id=context_id,
            type=prompt_type,
            message=raw.get("message"),
            default_value=raw.get("defaultValue"),
            accepted=raw.get("accepted"),
            user_text=raw.get("userText"),
        )


@dataclass(frozen=True)
class NavigationResult:
    """Result of browsingContext.navigate and browsingContext.reload."""

    url: str
    navigation_id: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "NavigationResult":
        return cls(url=raw.get("url", ""), navigation_id=raw.get("navigation"))
