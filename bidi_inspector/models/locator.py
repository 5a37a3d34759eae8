"""Locators for browsingContext.locateNodes."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ResultOwnership(Enum):
    """Whether located nodes come back with an owned handle."""

    NONE = "none"
    ROOT = "root"


class InnerTextMatchType(Enum):
    FULL = "full"
    PARTIAL = "partial"


@dataclass(frozen=True)
class Locator:
    """How to find nodes in a browsing context.

    Build instances through the class methods; each produces exactly one
    locator variant. The selector text itself is not checked here, an empty
    or invalid one is reported by the remote end.
    """

    type: str
    value: Any
    options: Optional[Dict[str, Any]] = None

    @classmethod
    def css(cls, selector: str) -> "Locator":
        _require_str("selector", selector)
        return cls("css", selector)

    @classmethod
    def xpath(cls, expression: str) -> "Locator":
        _require_str("expression", expression)
        return cls("xpath", expression)

    @classmethod
    def inner_text(
        cls,
        text: str,
        ignore_case: Optional[bool] = None,
        match_type: Optional[str] = None,
        max_depth: Optional[int] = None,
    ) -> "Locator":
        """Locate nodes by rendered text.

        Args:
            text: Text to match
            ignore_case: Case-insensitive matching
            match_type: "full" or "partial"
            max_depth: How deep below a matching node to keep looking

        Raises:
            ValueError: If match_type or max_depth is invalid
        """
        _require_str("text", text)
        options: Dict[str, Any] = {}
        if ignore_case is not None:
            options["ignoreCase"] = bool(ignore_case)
        if match_type is not None:
            options["matchType"] = InnerTextMatchType(match_type).value
        if max_depth is not None:
            if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
                raise ValueError(f"max_depth must be a non-negative integer, got {max_depth!r}")
            options["maxDepth"] = max_depth
        return cls("innerText", text, options or None)

    @classmethod
    def accessibility(
        cls, name: Optional[str] = None, role: Optional[str] = None
    ) -> "Locator":
        """Locate nodes by accessible name and/or role.

        Raises:
            ValueError: If neither name nor role is given
        """
        if name is None and role is None:
            raise ValueError("Accessibility locator needs a name or a role")
        criteria = {}
        if name is not None:
            _require_str("name", name)
            criteria["name"] = name
        if role is not None:
            _require_str("role", role)
            criteria["role"] = role
        return cls("accessibility", criteria)

    def to_dict(self) -> Dict[str, Any]:
        """Wire form of the locator."""
        locator = {"type": self.type, "value": self.value}
        if self.options:
            locator.update(self.options)
        return locator


def _require_str(name: str, value: Any) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string, got {type(value).__name__}")
