"""Post an approving review unless this account already approved the head commit."""

from __future__ import annotations

from typing import Any, Optional

from shared.github_client import GitHubApiError, GitHubClient
from shared.logging import get_logger
from ship_show_ask.models import PullRequestRef

logger = get_logger("ship_show_ask.approve")

# Login used by the built-in GITHUB_TOKEN, which is not allowed to read /user.
ACTIONS_BOT_LOGIN = "github-actions[bot]"

_DECISIVE_STATES = {"APPROVED", "DISMISSED"}


def _authenticated_login(client: GitHubClient) -> str:
    try:
        user = client.get_authenticated_user()
    except GitHubApiError as exc:
        if exc.status != 403:
            raise
        return ACTIONS_BOT_LOGIN
    return str(user.get("login") or "")


def already_approved(reviews: list[dict[str, Any]], login: str, commit_id: str) -> bool:
    """True when the latest approve/dismiss decision by ``login`` on ``commit_id`` is an approval."""
    latest_state: Optional[str] = None
    for review in reviews:
        user = review.get("user") or {}
        if user.get("login") != login or review.get("commit_id") != commit_id:
            continue
        state = str(review.get("state") or "").upper()
        if state in _DECISIVE_STATES:
            latest_state = state
    return latest_state == "APPROVED"


def approve(client: GitHubClient, ref: PullRequestRef, review_message: Optional[str] = None) -> bool:
    """Approve the pull request. Returns False when an approval already exists."""
    log_context = {"repo": ref.full_name, "pr_number": ref.number}
    login = _authenticated_login(client)

    pr = client.get_pull_request(ref.owner, ref.repo, ref.number)
    commit_id = str((pr.get("head") or {}).get("sha") or "")

    reviews = client.list_pull_reviews(ref.owner, ref.repo, ref.number)
    if login and commit_id and already_approved(reviews, login, commit_id):
        logger.info("review_skipped", extra={**log_context, "extra": {"login": login, "commit_id": commit_id}})
        return False

    client.create_pull_review(
        ref.owner,
        ref.repo,
        ref.number,
        body=review_message,
        event="APPROVE",
        commit_id=commit_id or None,
    )
    logger.info("review_created", extra={**log_context, "extra": {"login": login, "commit_id": commit_id}})
    return True
