"""Keyword classification shared by the summarizer and prompt-type metrics.

A :class:`KeywordRule` tags text when any of its keywords occurs as a
case-insensitive substring. :class:`KeywordClassifier` evaluates an ordered
rule table either as "first match wins" (prompt types) or "all matches, in
rule order" (summary topics).
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PROMPT_TYPE = "general"


@dataclass(frozen=True)
class KeywordRule:
    """A tag plus the substrings that trigger it."""

    tag: str
    keywords: tuple[str, ...]

    def matches(self, lowered: str) -> bool:
        """Return ``True`` if any keyword occurs in the already-lowercased text."""
        return any(k in lowered for k in self.keywords)


class KeywordClassifier:
    """Ordered keyword rule table."""

    def __init__(self, rules: tuple[KeywordRule, ...] | list[KeywordRule]) -> None:
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple[KeywordRule, ...]:
        return self._rules

    @property
    def tags(self) -> list[str]:
        return [r.tag for r in self._rules]

    def first_match(self, text: str, default: str) -> str:
        """Return the tag of the first matching rule, else *default*."""
        lowered = text.lower()
        for rule in self._rules:
            if rule.matches(lowered):
                return rule.tag
        return default

    def all_matches(self, text: str) -> list[str]:
        """Return the tags of every matching rule, in rule order."""
        lowered = text.lower()
        return [r.tag for r in self._rules if r.matches(lowered)]


# ---------------------------------------------------------------------------
# Rule tables
# ---------------------------------------------------------------------------

SUMMARY_TOPICS = KeywordClassifier(
    (
        KeywordRule("code/debugging", ("code", "debug", "error")),
        KeywordRule("explanations", ("explain", "how", "what")),
        KeywordRule("content creation", ("write", "create", "generate")),
    )
)

PROMPT_TYPES = KeywordClassifier(
    (
        KeywordRule(
            "code_help",
            (
                "code", "debug", "programming", "function", "variable",
                "syntax", "compile", "error", "algorithm", "script",
            ),
        ),
        KeywordRule(
            "explanation",
            (
                "explain", "how", "what", "why", "define",
                "describe", "clarify", "understand", "meaning", "difference",
            ),
        ),
        KeywordRule(
            "creative",
            (
                "write", "create", "generate", "compose", "draft",
                "make", "build", "design", "story", "poem",
            ),
        ),
        KeywordRule(
            "analysis",
            ("analyze", "review", "compare", "evaluate", "assess", "critique", "examine", "study"),
        ),
        KeywordRule(
            "problem_solving",
            ("solve", "calculate", "math", "equation", "formula", "problem", "compute", "number"),
        ),
        KeywordRule(
            "language",
            ("translate", "language", "grammar", "spell", "correct", "edit"),
        ),
    )
)


def classify_prompt(text: str) -> str:
    """Classify a user utterance into a prompt-type tag for metrics."""
    if not text:
        return DEFAULT_PROMPT_TYPE
    return PROMPT_TYPES.first_match(text, DEFAULT_PROMPT_TYPE)
