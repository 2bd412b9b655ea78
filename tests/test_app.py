"""Tests for the action entry point: reporting, outputs and approval gating."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from shared.github_client import GitHubApiError
from ship_show_ask.app import INVALID_TITLE_MESSAGE, main, run
from ship_show_ask.config import ActionInputs
from ship_show_ask.models import MatchConfig


def _inputs(**overrides: Any) -> ActionInputs:
    values: dict[str, Any] = {
        "github_token": "gh-tok",
        "repository": "tsinis/test",
        "event_payload": {"pull_request": {"number": 101}},
    }
    values.update(overrides)
    return ActionInputs(**values)


def _make_gh(title: str) -> MagicMock:
    gh = MagicMock()
    gh.get_pull_request.return_value = {"title": title, "head": {"sha": "abc"}}
    gh.get_authenticated_user.return_value = {"login": "bot"}
    gh.list_pull_reviews.return_value = []
    return gh


@pytest.fixture
def step_files(tmp_path: Path) -> dict[str, str]:
    return {
        "GITHUB_OUTPUT": str(tmp_path / "output"),
        "GITHUB_STEP_SUMMARY": str(tmp_path / "summary"),
    }


def _outputs(step_files: dict[str, str]) -> dict[str, str]:
    lines = Path(step_files["GITHUB_OUTPUT"]).read_text(encoding="utf-8").splitlines()
    return dict(line.split("=", 1) for line in lines)


@pytest.mark.parametrize("title, strategy", [("(ship) deps", "ship"), ("[show] dashboard", "show")])
def test_ship_and_show_are_approved(title: str, strategy: str, step_files: dict[str, str]) -> None:
    gh = _make_gh(title)

    assert run(_inputs(review_message="lgtm"), client=gh, env=step_files) == 0

    gh.add_labels.assert_called_once_with("tsinis", "test", 101, [strategy])
    gh.create_pull_review.assert_called_once_with(
        "tsinis", "test", 101, body="lgtm", event="APPROVE", commit_id="abc",
    )
    assert _outputs(step_files) == {"strategy": strategy, "approved": "true"}
    assert strategy in Path(step_files["GITHUB_STEP_SUMMARY"]).read_text(encoding="utf-8")


def test_ask_is_labeled_but_not_approved(step_files: dict[str, str]) -> None:
    gh = _make_gh("{ask} caching")

    assert run(_inputs(), client=gh, env=step_files) == 0

    gh.add_labels.assert_called_once_with("tsinis", "test", 101, ["ask"])
    gh.create_pull_review.assert_not_called()
    assert _outputs(step_files) == {"strategy": "ask", "approved": "false"}


def test_approve_disabled(step_files: dict[str, str]) -> None:
    gh = _make_gh("(ship) deps")

    assert run(_inputs(approve=False), client=gh, env=step_files) == 0
    gh.create_pull_review.assert_not_called()


def test_fallback_to_ask_passes_without_approval(step_files: dict[str, str]) -> None:
    gh = _make_gh("no keyword here")

    assert run(_inputs(match=MatchConfig(fallback_to_ask=True)), client=gh, env=step_files) == 0
    gh.create_pull_review.assert_not_called()


def test_invalid_title_fails(capsys: pytest.CaptureFixture[str], step_files: dict[str, str]) -> None:
    gh = _make_gh("Valid Title")

    assert run(_inputs(), client=gh, env=step_files) == 1

    assert f"::error::{INVALID_TITLE_MESSAGE}" in capsys.readouterr().out
    gh.add_labels.assert_not_called()
    gh.create_pull_review.assert_not_called()
    assert not Path(step_files["GITHUB_OUTPUT"]).exists()


def test_missing_pull_request_fails(capsys: pytest.CaptureFixture[str]) -> None:
    gh = _make_gh("(ship) x")

    assert run(_inputs(event_payload={}), client=gh, env={}) == 1
    assert "Make sure you're triggering this action on the `pull_request`" in capsys.readouterr().out
    gh.get_pull_request.assert_not_called()


def test_bad_token_fails(capsys: pytest.CaptureFixture[str]) -> None:
    gh = _make_gh("(ship) x")
    gh.get_pull_request.side_effect = GitHubApiError(401, "Bad credentials")

    assert run(_inputs(), client=gh, env={}) == 1
    assert "`github-token` input parameter" in capsys.readouterr().out
    gh.add_labels.assert_not_called()


def test_self_approval_reported(capsys: pytest.CaptureFixture[str]) -> None:
    gh = _make_gh("(ship) x")
    gh.create_pull_review.side_effect = GitHubApiError(422, "Can not approve your own pull request")

    assert run(_inputs(), client=gh, env={}) == 1
    assert "dedicated bot account" in capsys.readouterr().out


def test_main_reports_input_errors(capsys: pytest.CaptureFixture[str]) -> None:
    env = {"GITHUB_REPOSITORY": "tsinis/test", "INPUT_GITHUB-TOKEN": "t", "INPUT_PULL-REQUEST-NUMBER": "x"}

    assert main(env) == 1
    assert "::error::Invalid `pull-request-number` value" in capsys.readouterr().out


def test_main_runs_with_env(tmp_path: Path) -> None:
    event_path = tmp_path / "event.json"
    event_path.write_text(json.dumps({"pull_request": {"number": 101}}), encoding="utf-8")
    env = {
        "GITHUB_REPOSITORY": "tsinis/test",
        "GITHUB_EVENT_PATH": str(event_path),
        "INPUT_GITHUB-TOKEN": "gh-tok",
        "GITHUB_OUTPUT": str(tmp_path / "output"),
    }
    gh = _make_gh("(show) demo")

    with patch("ship_show_ask.app.GitHubClient", return_value=gh) as client_cls:
        assert main(env) == 0

    assert client_cls.call_args.kwargs["api_base"] == "https://api.github.com"
    assert client_cls.call_args.kwargs["token_provider"]() == "gh-tok"
    gh.create_pull_review.assert_called_once()


@pytest.mark.parametrize("repository", ["owner/", "/repo"])
def test_main_reports_bad_repository(repository: str, capsys: pytest.CaptureFixture[str]) -> None:
    env = {"GITHUB_REPOSITORY": repository, "INPUT_GITHUB-TOKEN": "t", "INPUT_PULL-REQUEST-NUMBER": "3"}

    with patch("ship_show_ask.app.GitHubClient") as client_cls:
        assert main(env) == 1

    out = capsys.readouterr().out
    assert "::error::`GITHUB_REPOSITORY` must be set to owner/repo" in out
    assert "pydantic" not in out
    client_cls.assert_not_called()
