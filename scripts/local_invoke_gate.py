#!/usr/bin/env python3
"""Run the action locally against a real pull request.

Usage: GITHUB_TOKEN=... local_invoke_gate.py owner/repo PR_NUMBER

Inputs can be overridden the way the runner passes them, e.g.
``INPUT_APPROVE=false INPUT_ADD-LABEL=false`` for a read-only run.
"""

import os
import pathlib
import sys

sys.path.append("src")
from ship_show_ask.app import main as run_action  # noqa: E402


def main() -> int:
    if len(sys.argv) < 3:
        print("usage: local_invoke_gate.py owner/repo PR_NUMBER", file=sys.stderr)
        return 2

    payload_path = pathlib.Path("scripts/sample_pull_request_event.json")
    env = dict(os.environ)
    env.setdefault("INPUT_APPROVE", "false")
    env.setdefault("INPUT_GITHUB-TOKEN", os.getenv("GITHUB_TOKEN", ""))
    env.update(
        {
            "GITHUB_REPOSITORY": sys.argv[1],
            "GITHUB_EVENT_NAME": "pull_request",
            "GITHUB_EVENT_PATH": str(payload_path),
            "INPUT_PULL-REQUEST-NUMBER": sys.argv[2],
        }
    )
    return run_action(env)


if __name__ == "__main__":
    raise SystemExit(main())
