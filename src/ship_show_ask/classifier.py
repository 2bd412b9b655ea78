"""Decide which ship/show/ask strategy a pull request title asks for.

With ``require_brackets`` the keyword must sit inside one matching bracket
pair, ``[ship]``, ``(ship)`` or ``{ship}``; any pair works for any keyword.
Without it the keyword is found as a plain substring. The leftmost match in
the title wins, and ties at the same position go to ship, then show, then ask.
Case-insensitive matching folds ASCII letters only.
"""

from __future__ import annotations

import re
from functools import lru_cache

from ship_show_ask.models import Classification, MatchConfig, Strategy

_BRACKET_PAIRS = (("[", "]"), ("(", ")"), ("{", "}"))


@lru_cache(maxsize=32)
def _compile(keywords: tuple[str, ...], case_sensitive: bool, require_brackets: bool) -> re.Pattern[str]:
    alternation = "|".join(re.escape(keyword) for keyword in keywords)
    if require_brackets:
        pattern = "|".join(
            f"{re.escape(opening)}({alternation}){re.escape(closing)}" for opening, closing in _BRACKET_PAIRS
        )
    else:
        pattern = f"({alternation})"
    flags = re.ASCII if case_sensitive else re.ASCII | re.IGNORECASE
    return re.compile(pattern, flags)


def _strategy_for(keyword: str, config: MatchConfig) -> Strategy | None:
    folded = keyword.lower()
    for strategy, configured in config.keywords():
        if folded == configured.lower():
            return strategy
    return None


def classify(title: str, config: MatchConfig) -> Classification:
    pattern = _compile(
        tuple(keyword for _, keyword in config.keywords()),
        config.case_sensitive,
        config.require_brackets,
    )
    match = pattern.search(title or "")
    if match is None:
        return Classification.no_match(config.fallback_to_ask)

    keyword = next((group for group in match.groups() if group), None)
    strategy = _strategy_for(keyword, config) if keyword else None
    if strategy is None:
        return Classification.no_match(config.fallback_to_ask)
    return Classification.matched(strategy, keyword)
