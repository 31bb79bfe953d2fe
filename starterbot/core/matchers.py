"""Message matchers — exact-string and regular-expression variants.

Both implement the ``Matcher`` protocol so the router never inspects the
matcher's type at dispatch time.  Matching is case-sensitive and always
evaluated against the full message text.
"""

from __future__ import annotations

import re
from typing import Literal, Protocol, runtime_checkable

StringMatchMode = Literal["contains", "equals"]


@runtime_checkable
class Matcher(Protocol):
    """Decides whether a message text selects a registration."""

    @property
    def description(self) -> str:
        """Human-readable form used in logs and route listings."""
        ...

    def matches(self, text: str) -> bool:
        ...


class ExactMatcher:
    """Matches a literal string.

    ``mode="contains"`` accepts any text containing the literal;
    ``mode="equals"`` requires full-string equality.
    """

    def __init__(self, literal: str, mode: StringMatchMode = "contains") -> None:
        if mode not in ("contains", "equals"):
            raise ValueError(f"Unknown string match mode: {mode!r}")
        self._literal = literal
        self._mode = mode

    @property
    def literal(self) -> str:
        return self._literal

    @property
    def mode(self) -> StringMatchMode:
        return self._mode

    @property
    def description(self) -> str:
        return f"{self._mode} {self._literal!r}"

    def matches(self, text: str) -> bool:
        if self._mode == "equals":
            return text == self._literal
        return self._literal in text


class PatternMatcher:
    """Matches a regular expression anywhere in the text unless anchored."""

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        self._pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    @property
    def pattern(self) -> re.Pattern[str]:
        return self._pattern

    @property
    def description(self) -> str:
        return f"/{self._pattern.pattern}/"

    def matches(self, text: str) -> bool:
        return self._pattern.search(text) is not None


def to_matcher(
    value: str | re.Pattern[str] | Matcher, mode: StringMatchMode = "contains"
) -> Matcher:
    """Coerce a registration argument into a ``Matcher``.

    Plain strings become ``ExactMatcher`` using *mode*; compiled patterns
    become ``PatternMatcher``; existing matchers pass through unchanged.
    """
    if isinstance(value, str):
        return ExactMatcher(value, mode)
    if isinstance(value, re.Pattern):
        return PatternMatcher(value)
    if isinstance(value, Matcher):
        return value
    raise TypeError(
        f"Cannot build a message matcher from {type(value).__name__}"
    )
