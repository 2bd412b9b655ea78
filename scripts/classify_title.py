#!/usr/bin/env python3
"""Classify a PR title locally without calling GitHub.

Usage: classify_title.py "<title>" [--no-brackets] [--case-sensitive] [--fallback-to-ask]
"""

from __future__ import annotations

import sys

sys.path.append("src")
from ship_show_ask.classifier import classify  # noqa: E402
from ship_show_ask.models import MatchConfig  # noqa: E402


def main() -> int:
    args = sys.argv[1:]
    flags = {arg for arg in args if arg.startswith("--")}
    positional = [arg for arg in args if not arg.startswith("--")]
    if not positional:
        print("::warning::No PR title provided; nothing to classify.")
        return 0

    title = positional[0]
    config = MatchConfig(
        require_brackets="--no-brackets" not in flags,
        case_sensitive="--case-sensitive" in flags,
        fallback_to_ask="--fallback-to-ask" in flags,
    )
    result = classify(title, config)
    if result.strategy is None:
        print("PR title carries no ship/show/ask keyword.")
        print("Expected format: [ship] short outcome, (show) ..., {ask} ...")
        print(f"Received: {title}")
        return 1

    print(f"{result.kind}: {result.strategy.value} (keyword: {result.keyword})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
