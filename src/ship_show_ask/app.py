"""Ship / Show / Ask pull request gate, run once per workflow job.

Reads the action inputs, labels the pull request with the strategy found in its
title and approves it when the strategy is Ship or Show. Exits non-zero when
the title carries no strategy or any API call fails.
"""

from __future__ import annotations

from typing import Mapping, Optional

from pydantic import ValidationError

from shared import actions
from shared.github_client import GitHubClient
from shared.logging import get_logger
from ship_show_ask.approve import approve
from ship_show_ask.config import ActionInputs
from ship_show_ask.errors import describe_exception
from ship_show_ask.gate import PullRequestGate, resolve_pull_request_ref
from ship_show_ask.models import GateOutcome

logger = get_logger("ship_show_ask")

INVALID_TITLE_MESSAGE = "Invalid PR title"


def _build_client(inputs: ActionInputs) -> GitHubClient:
    token = inputs.github_token
    return GitHubClient(token_provider=lambda: token, api_base=inputs.api_base)


def _summary_line(outcome: GateOutcome, approved: bool) -> str:
    strategy = outcome.strategy.value if outcome.strategy else "none"
    return f"**Ship / Show / Ask:** strategy `{strategy}`, labeled: {outcome.labeled}, approved: {approved}"


def run(
    inputs: ActionInputs,
    client: Optional[GitHubClient] = None,
    env: Optional[Mapping[str, str]] = None,
) -> int:
    client = client or _build_client(inputs)
    outcome = PullRequestGate(client).evaluate(inputs.gate_options())

    if not outcome.ok:
        return actions.set_failed(outcome.message or "Unknown error")
    if outcome.strategy is None:
        return actions.set_failed(INVALID_TITLE_MESSAGE)

    actions.set_output("strategy", outcome.strategy.value, env)

    approved = False
    if inputs.approve and outcome.strategy.approves:
        ref = resolve_pull_request_ref(inputs.repository, inputs.pr_number, inputs.event_payload)
        try:
            approved = approve(client, ref, inputs.review_message)
        except Exception as exc:  # noqa: BLE001
            _, message = describe_exception(exc)
            logger.error("approval_failed", extra={"repo": ref.full_name, "pr_number": ref.number})
            return actions.set_failed(message)

    actions.set_output("approved", "true" if approved else "false", env)
    actions.append_summary(_summary_line(outcome, approved), env)
    logger.info(
        "run_completed",
        extra={"strategy": outcome.strategy.value, "event_name": inputs.event_name or None},
    )
    return 0


def main(env: Optional[Mapping[str, str]] = None) -> int:
    try:
        inputs = ActionInputs.from_env(env)
    except ValidationError as exc:
        return actions.set_failed(f"Invalid action inputs: {exc}")
    except Exception as exc:  # noqa: BLE001
        return actions.set_failed(describe_exception(exc)[1])

    try:
        return run(inputs, env=env)
    except Exception as exc:  # noqa: BLE001
        logger.exception("run_failed")
        return actions.set_failed(describe_exception(exc)[1])


if __name__ == "__main__":
    raise SystemExit(main())
