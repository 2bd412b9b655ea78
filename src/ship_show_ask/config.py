"""Read action inputs and the Actions environment into typed, immutable options.

This is the only place that turns raw strings into defaults; everything
downstream receives a fully populated ``MatchConfig`` / ``GateOptions``.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from ship_show_ask.errors import ConfigurationError
from ship_show_ask.models import DEFAULT_KEYWORDS, GateOptions, MatchConfig, Strategy

DEFAULT_API_BASE = "https://api.github.com"


def get_input(name: str, env: Mapping[str, str]) -> str:
    """Same lookup rule as ``@actions/core``: ``INPUT_<NAME>`` upper-cased, spaces as underscores."""
    return env.get(f"INPUT_{name.replace(' ', '_').upper()}", "").strip()


def _as_bool(value: Any, *, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "t", "yes", "y", "on"}:
            return True
        if normalized in {"0", "false", "f", "no", "n", "off"}:
            return False
    return default


def _parse_pr_number(raw: str) -> Optional[int]:
    if not raw:
        return None
    try:
        number = int(raw, 10)
    except ValueError:
        raise ConfigurationError("Invalid `pull-request-number` value") from None
    if number <= 0:
        raise ConfigurationError("Invalid `pull-request-number` value")
    return number


def load_event_payload(env: Mapping[str, str]) -> dict[str, Any]:
    event_path = env.get("GITHUB_EVENT_PATH", "")
    if not event_path or not Path(event_path).is_file():
        return {}
    try:
        payload = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Event payload at {event_path} is not valid JSON") from exc
    return payload if isinstance(payload, dict) else {}


class ActionInputs(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    github_token: str
    repository: str
    event_name: str = ""
    event_payload: dict[str, Any] = {}
    api_base: str = DEFAULT_API_BASE
    pr_number: Optional[int] = None
    match: MatchConfig = MatchConfig()
    add_label: bool = True
    approve: bool = True
    review_message: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ActionInputs":
        env = os.environ if env is None else env

        token = get_input("github-token", env)
        if not token:
            raise ConfigurationError("Input required and not supplied: github-token")

        repository = env.get("GITHUB_REPOSITORY", "").strip()
        owner, _, repo = repository.partition("/")
        if not owner or not repo or "/" in repo:
            raise ConfigurationError("`GITHUB_REPOSITORY` must be set to owner/repo")

        match = MatchConfig(
            ship_keyword=get_input("ship-keyword", env) or DEFAULT_KEYWORDS[Strategy.SHIP],
            show_keyword=get_input("show-keyword", env) or DEFAULT_KEYWORDS[Strategy.SHOW],
            ask_keyword=get_input("ask-keyword", env) or DEFAULT_KEYWORDS[Strategy.ASK],
            case_sensitive=_as_bool(get_input("case-sensitive", env), default=False),
            require_brackets=_as_bool(get_input("require-brackets", env), default=True),
            fallback_to_ask=_as_bool(get_input("fallback-to-ask", env), default=False),
        )

        return cls(
            github_token=token,
            repository=repository,
            event_name=env.get("GITHUB_EVENT_NAME", ""),
            event_payload=load_event_payload(env),
            api_base=env.get("GITHUB_API_URL") or DEFAULT_API_BASE,
            pr_number=_parse_pr_number(get_input("pull-request-number", env)),
            match=match,
            add_label=_as_bool(get_input("add-label", env), default=True),
            approve=_as_bool(get_input("approve", env), default=True),
            review_message=get_input("review-message", env) or None,
        )

    def gate_options(self) -> GateOptions:
        return GateOptions(
            token=self.github_token,
            repository=self.repository,
            pr_number=self.pr_number,
            event_payload=self.event_payload,
            match=self.match,
            add_label=self.add_label,
        )
