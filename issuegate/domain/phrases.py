"""Lexical phrase matching for approve/deny comments.

A comment matches a phrase when, ignoring surrounding whitespace, it is
exactly that phrase (case-insensitive) followed by any run of ``.`` or ``!``.
Phrases are literal text; regex metacharacters in them are escaped.
"""

from __future__ import annotations

import re
from functools import lru_cache

from issuegate.domain.errors import PatternError


class PhraseMatcher:
    """Precompiled matcher for one phrase vocabulary."""

    def __init__(self, phrases: tuple[str, ...], patterns: list[re.Pattern[str]]) -> None:
        self.phrases = phrases
        self._patterns = patterns

    def matches(self, body: str) -> bool:
        return any(pattern.fullmatch(body) for pattern in self._patterns)


def _compile_phrase(phrase: str) -> re.Pattern[str]:
    if not isinstance(phrase, str) or not phrase.strip():
        raise PatternError(f"Phrase must be non-empty text: {phrase!r}", phrase=phrase)
    try:
        return re.compile(rf"\s*{re.escape(phrase.strip())}[.!]*\s*", re.IGNORECASE)
    except re.error as e:
        raise PatternError(f"Cannot compile phrase {phrase!r}: {e}", phrase=phrase) from e


@lru_cache(maxsize=32)
def compile_phrases(phrases: tuple[str, ...]) -> PhraseMatcher:
    """Compile a vocabulary into a matcher, cached by vocabulary.

    Raises:
        PatternError: If any phrase cannot be compiled
    """
    return PhraseMatcher(phrases, [_compile_phrase(phrase) for phrase in phrases])


def format_phrases(phrases: tuple[str, ...] | list[str]) -> str:
    """Quote each phrase and join them for display: ``"a", "b"``."""
    return ", ".join(f'"{phrase}"' for phrase in phrases)
