# src/taskpad/tasks/task_icons.py

from __future__ import annotations

"""
Rule-based task icon classifier.

Rules are plain data evaluated in priority order:
- matching is case-insensitive and on whole words only
  ("homework" is its own keyword; it never matches "home" or "work")
- the first rule with any matching keyword wins
- no match -> DEFAULT_ICON
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

DEFAULT_ICON = "📌"


@dataclass(frozen=True, slots=True)
class IconRule:
    category: str
    icon: str
    keywords: tuple[str, ...]
    _pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.keywords:
            raise ValueError(f"rule {self.category!r} has no keywords")
        alternatives = "|".join(re.escape(k) for k in self.keywords)
        object.__setattr__(self, "_pattern", re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE))

    def matches(self, text: str) -> bool:
        return self._pattern.search(text) is not None


def _rule(category: str, icon: str, keywords: str) -> IconRule:
    return IconRule(category=category, icon=icon, keywords=tuple(keywords.split()))


DEFAULT_RULES: tuple[IconRule, ...] = (
    _rule("work", "💼", "work meeting project deadline report presentation office business client boss"),
    _rule("shopping", "🛒", "buy shop shopping grocery store market purchase"),
    _rule("study", "📚", "study learn read homework exam test assignment course book class"),
    _rule("exercise", "💪", "exercise gym workout run jog fitness yoga sport training"),
    _rule("health", "🏥", "doctor hospital medicine appointment health checkup dentist clinic"),
    _rule("home", "🏠", "clean laundry dishes house home room organize fix repair"),
    _rule("food", "🍳", "cook food meal dinner lunch breakfast recipe kitchen eat restaurant"),
    _rule("phone", "📞", "call phone dial contact ring"),
    _rule("email", "📧", "email mail send message inbox"),
    _rule("travel", "✈️", "travel trip flight airport hotel vacation journey visit"),
    _rule("scheduling", "📅", "meet appointment schedule date time calendar"),
    _rule("finance", "💰", "pay bill money bank finance budget expense salary"),
    _rule("entertainment", "🎬", "movie watch game play entertainment fun party celebrate"),
)


def match_rule(text: str, rules: Sequence[IconRule] = DEFAULT_RULES) -> IconRule | None:
    if not text:
        return None
    for rule in rules:
        if rule.matches(text):
            return rule
    return None


def classify(
    text: str,
    rules: Sequence[IconRule] = DEFAULT_RULES,
    default: str = DEFAULT_ICON,
) -> str:
    """Return the icon of the first matching rule, or `default`."""
    rule = match_rule(text, rules)
    return rule.icon if rule is not None else default
