from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ship_show_ask.errors import ErrorKind


class Strategy(str, Enum):
    SHIP = "ship"
    SHOW = "show"
    ASK = "ask"

    @property
    def label(self) -> str:
        return self.value

    @property
    def approves(self) -> bool:
        """Ship and Show are merged without waiting on a reviewer."""
        return self in (Strategy.SHIP, Strategy.SHOW)


DEFAULT_KEYWORDS: dict[Strategy, str] = {
    Strategy.SHIP: "ship",
    Strategy.SHOW: "show",
    Strategy.ASK: "ask",
}


class MatchConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    ship_keyword: str = DEFAULT_KEYWORDS[Strategy.SHIP]
    show_keyword: str = DEFAULT_KEYWORDS[Strategy.SHOW]
    ask_keyword: str = DEFAULT_KEYWORDS[Strategy.ASK]
    case_sensitive: bool = False
    require_brackets: bool = True
    fallback_to_ask: bool = False

    @field_validator("ship_keyword", "show_keyword", "ask_keyword")
    @classmethod
    def validate_keyword(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("keyword cannot be empty")
        return value

    def keywords(self) -> list[tuple[Strategy, str]]:
        """Keywords in matching precedence order."""
        return [
            (Strategy.SHIP, self.ship_keyword),
            (Strategy.SHOW, self.show_keyword),
            (Strategy.ASK, self.ask_keyword),
        ]


ClassificationKind = Literal["matched", "no_match", "fallback"]


@dataclass(frozen=True)
class Classification:
    kind: ClassificationKind
    strategy: Optional[Strategy] = None
    keyword: Optional[str] = None

    @classmethod
    def matched(cls, strategy: Strategy, keyword: str) -> "Classification":
        return cls("matched", strategy, keyword)

    @classmethod
    def no_match(cls, fallback_to_ask: bool = False) -> "Classification":
        if fallback_to_ask:
            return cls("fallback", Strategy.ASK)
        return cls("no_match")

    def as_log_fields(self) -> dict[str, Any]:
        return {
            "classification": self.kind,
            "strategy": self.strategy.value if self.strategy else None,
            "keyword": self.keyword,
        }


@dataclass(frozen=True)
class PullRequestRef:
    owner: str
    repo: str
    number: int

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


class GateOptions(BaseModel):
    """Everything one gate run needs, already normalized."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    token: str
    repository: str
    pr_number: Optional[int] = None
    event_payload: dict[str, Any] = {}
    match: MatchConfig = MatchConfig()
    add_label: bool = True

    @model_validator(mode="after")
    def validate_repository(self) -> "GateOptions":
        owner, _, repo = self.repository.partition("/")
        if not owner or not repo or "/" in repo:
            raise ValueError(f"repository must look like owner/repo, got {self.repository!r}")
        return self

    @property
    def owner(self) -> str:
        return self.repository.split("/", maxsplit=1)[0]

    @property
    def repo(self) -> str:
        return self.repository.split("/", maxsplit=1)[1]


@dataclass(frozen=True)
class GateOutcome:
    """Terminal result of one gate run."""

    strategy: Optional[Strategy] = None
    classification: Optional[Classification] = None
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None
    labeled: bool = False

    @classmethod
    def success(cls, classification: Classification, labeled: bool = False) -> "GateOutcome":
        return cls(strategy=classification.strategy, classification=classification, labeled=labeled)

    @classmethod
    def no_match(cls, classification: Classification) -> "GateOutcome":
        return cls(classification=classification)

    @classmethod
    def failure(cls, error_kind: ErrorKind, message: str) -> "GateOutcome":
        return cls(error_kind=error_kind, message=message)

    @property
    def ok(self) -> bool:
        return self.error_kind is None
