from __future__ import annotations

from typing import Callable, Optional, Sequence

import requests


class GitHubApiError(Exception):
    """Non-2xx response from the GitHub REST API."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message

    @classmethod
    def from_response(cls, response: requests.Response) -> "GitHubApiError":
        message = ""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = str(body.get("message") or "")
        return cls(response.status_code, message or response.reason or f"HTTP {response.status_code}")


class GitHubClient:
    def __init__(
        self,
        token_provider: Callable[[], str],
        api_base: str = "https://api.github.com",
        session: Optional[requests.Session] = None,
        timeout: float = 20,
    ) -> None:
        self._token_provider = token_provider
        self._api_base = api_base.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self._api_base}{path}"
        headers = dict(kwargs.pop("headers", {}))
        headers.update(
            {
                "Authorization": f"token {self._token_provider()}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )
        # Single attempt: a failed call ends the run.
        response = self._session.request(method, url, headers=headers, timeout=self._timeout, **kwargs)
        if response.status_code >= 400:
            raise GitHubApiError.from_response(response)
        return response

    def get_authenticated_user(self) -> dict:
        response = self._request("GET", "/user")
        return response.json()

    def get_pull_request(self, owner: str, repo: str, pull_number: int) -> dict:
        response = self._request("GET", f"/repos/{owner}/{repo}/pulls/{pull_number}")
        return response.json()

    def add_labels(self, owner: str, repo: str, issue_number: int, labels: Sequence[str]) -> list[dict]:
        """Add labels to an issue or pull request; existing labels are kept."""
        response = self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{issue_number}/labels",
            json={"labels": list(labels)},
        )
        return response.json()

    def list_pull_reviews(self, owner: str, repo: str, pull_number: int) -> list[dict]:
        """Return every review on a pull request, oldest first."""
        page = 1
        reviews: list[dict] = []
        while True:
            response = self._request(
                "GET",
                f"/repos/{owner}/{repo}/pulls/{pull_number}/reviews",
                params={"per_page": 100, "page": page},
            )
            page_data = response.json()
            if not page_data:
                break
            reviews.extend(page_data)
            if len(page_data) < 100:
                break
            page += 1
        return reviews

    def create_pull_review(
        self,
        owner: str,
        repo: str,
        pull_number: int,
        body: Optional[str] = None,
        event: str = "COMMENT",
        commit_id: Optional[str] = None,
    ) -> dict:
        payload: dict = {"event": event}
        if body:
            payload["body"] = body
        if commit_id:
            payload["commit_id"] = commit_id

        response = self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls/{pull_number}/reviews",
            json=payload,
        )
        return response.json()
