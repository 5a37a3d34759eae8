"""Predicate builders for inspector registrations.

A filter is any callable taking the deserialized event value and returning a
bool. The builders here return small frozen callables so the same filter can
be shared by several registrations.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Union

from .models import LogLevel, LogType

Filter = Callable[[Any], bool]
FilterSpec = Optional[Union[Filter, Iterable[Filter]]]


@dataclass(frozen=True)
class _AttributeEquals:
    attribute: str
    expected: Any

    def __call__(self, value: Any) -> bool:
        return getattr(value, self.attribute, None) == self.expected


@dataclass(frozen=True)
class _TextContains:
    needle: str
    ignore_case: bool = False

    def __call__(self, value: Any) -> bool:
        text = getattr(value, "text", None)
        if not isinstance(text, str):
            return False
        if self.ignore_case:
            return self.needle.lower() in text.lower()
        return self.needle in text


@dataclass(frozen=True)
class _AllOf:
    predicates: tuple

    def __call__(self, value: Any) -> bool:
        return all(predicate(value) for predicate in self.predicates)


class FilterBy:
    """Factory for common event filters."""

    @staticmethod
    def log_level(level: Union[str, LogLevel]) -> Filter:
        """Accept log entries at exactly ``level``.

        Args:
            level: One of debug, info, warning (or warn), error

        Raises:
            ValueError: If the level is not recognized
        """
        try:
            log_level = LogLevel(level)
        except ValueError:
            valid = ", ".join(member.value for member in LogLevel)
            raise ValueError(f"Unknown log level {level!r}, expected one of: {valid}") from None
        return _AttributeEquals("level", log_level)

    @staticmethod
    def log_type(log_type: Union[str, LogType]) -> Filter:
        """Accept log entries of the given type (console or javascript)."""
        return _AttributeEquals("type", LogType(log_type))

    @staticmethod
    def text_contains(needle: str, ignore_case: bool = False) -> Filter:
        """Accept entries whose ``text`` contains ``needle``."""
        if not isinstance(needle, str):
            raise TypeError("needle must be a string")
        return _TextContains(needle, ignore_case)

    @staticmethod
    def browsing_context(context_id: str) -> Filter:
        """Accept entries produced in the given browsing context."""
        return _AttributeEquals("browsing_context_id", context_id)


def all_of(*predicates: Filter) -> Filter:
    """Combine predicates with logical AND."""
    return _AllOf(tuple(predicates))


def compose_filters(filter_by: FilterSpec) -> Optional[Filter]:
    """Normalize a filter argument to a single predicate (or None).

    Accepts None, one callable, or an iterable of callables.
    """
    if filter_by is None:
        return None
    if callable(filter_by):
        return filter_by

    predicates = tuple(filter_by)
    for predicate in predicates:
        if not callable(predicate):
            raise TypeError(f"Filter {predicate!r} is not callable")
    if not predicates:
        return None
    if len(predicates) == 1:
        return predicates[0]
    return all_of(*predicates)
