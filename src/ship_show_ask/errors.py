"""Failure taxonomy for a run and the remediation hints shown to the user."""

from __future__ import annotations

from enum import Enum

from shared.github_client import GitHubApiError


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


class ConfigurationError(ValueError):
    """The run cannot start: inputs or event payload are missing or malformed."""


MISSING_PULL_REQUEST_MESSAGE = (
    "Event payload missing `pull_request` key, and no `pull-request-number` provided as input. "
    "Make sure you're triggering this action on the `pull_request` or `pull_request_target` events."
)

_STATUS_HINTS = {
    401: "Please check that the `github-token` input parameter is set correctly.",
    403: (
        "In some cases, the GitHub token used for actions triggered from `pull_request` events "
        "are read-only, which can cause this problem. Switching to the `pull_request_target` "
        "event typically resolves this issue."
    ),
    404: (
        "This typically means the token you're using doesn't have access to this repository. "
        "Use the built-in `${{ secrets.GITHUB_TOKEN }}` token or review the scopes assigned "
        "to your personal access token."
    ),
    422: (
        "This typically happens when you try to approve the pull request with the same user "
        "account that created the pull request. Try using the built-in `${{ secrets.GITHUB_TOKEN }}` "
        "token, or if you're using a personal access token, use one that belongs to a dedicated bot account."
    ),
}


def describe_api_error(exc: GitHubApiError) -> str:
    hint = _STATUS_HINTS.get(exc.status)
    if hint is None:
        return f"Error (code {exc.status}): {exc.message}"
    return f"{exc.message}. {hint}"


def describe_exception(exc: BaseException) -> tuple[ErrorKind, str]:
    """Map any exception raised during a run onto the failure taxonomy."""
    if isinstance(exc, ConfigurationError):
        return ErrorKind.CONFIGURATION, str(exc)
    if isinstance(exc, GitHubApiError):
        return ErrorKind.TRANSPORT, describe_api_error(exc)
    return ErrorKind.UNKNOWN, str(exc) or "Unknown error"
