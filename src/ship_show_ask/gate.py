"""Fetch a pull request, classify its title and label it with the strategy."""

from __future__ import annotations

from typing import Any, Optional

from shared.github_client import GitHubClient
from shared.logging import get_logger
from ship_show_ask.classifier import classify
from ship_show_ask.errors import MISSING_PULL_REQUEST_MESSAGE, ConfigurationError, describe_exception
from ship_show_ask.models import GateOptions, GateOutcome, PullRequestRef, Strategy

logger = get_logger("ship_show_ask.gate")


def resolve_pull_request_ref(
    repository: str,
    pr_number: Optional[int],
    event_payload: dict[str, Any],
) -> PullRequestRef:
    """Explicit number first, then the triggering event's pull request."""
    number: Any = pr_number
    if not number:
        pull_request = event_payload.get("pull_request")
        number = pull_request.get("number") if isinstance(pull_request, dict) else None
    if not number:
        raise ConfigurationError(MISSING_PULL_REQUEST_MESSAGE)
    try:
        number = int(number)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Event payload has an invalid pull request number: {number!r}") from None
    if number <= 0:
        raise ConfigurationError(f"Event payload has an invalid pull request number: {number!r}")
    owner, repo = repository.split("/", maxsplit=1)
    return PullRequestRef(owner=owner, repo=repo, number=number)


class PullRequestGate:
    def __init__(self, client: GitHubClient) -> None:
        self._client = client

    def evaluate(self, options: GateOptions) -> GateOutcome:
        try:
            ref = resolve_pull_request_ref(options.repository, options.pr_number, options.event_payload)
        except ConfigurationError as exc:
            logger.error("gate_failed", extra={"extra": {"error_kind": "configuration"}})
            return GateOutcome.failure(*describe_exception(exc))

        log_context = {"repo": ref.full_name, "pr_number": ref.number}
        try:
            return self._evaluate(ref, options, log_context)
        except Exception as exc:  # noqa: BLE001
            kind, message = describe_exception(exc)
            logger.error("gate_failed", extra={**log_context, "extra": {"error_kind": kind.value}})
            return GateOutcome.failure(kind, message)

    def _evaluate(self, ref: PullRequestRef, options: GateOptions, log_context: dict[str, Any]) -> GateOutcome:
        pr = self._client.get_pull_request(ref.owner, ref.repo, ref.number)
        title = pr.get("title") or ""
        logger.info("pull_request_fetched", extra=log_context)

        classification = classify(title, options.match)
        logger.info(
            "title_classified",
            extra={**log_context, "extra": {"title": title, **classification.as_log_fields()}},
        )
        if classification.strategy is None:
            return GateOutcome.no_match(classification)

        labeled = False
        if options.add_label:
            self._client.add_labels(ref.owner, ref.repo, ref.number, [classification.strategy.label])
            labeled = True
            logger.info("label_added", extra={**log_context, "strategy": classification.strategy.value})
        return GateOutcome.success(classification, labeled=labeled)


def evaluate_strategy(client: GitHubClient, options: GateOptions) -> Optional[Strategy]:
    """Strategy for the pull request, or None on no match or any failure."""
    return PullRequestGate(client).evaluate(options).strategy
