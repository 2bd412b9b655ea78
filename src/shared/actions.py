"""GitHub Actions workflow commands and step files.

Commands are printed to stdout (``::error::message``); step outputs and the job
summary are appended to the files named by ``GITHUB_OUTPUT`` and
``GITHUB_STEP_SUMMARY``. Outside of Actions those variables are unset and the
file writers become no-ops.
"""

from __future__ import annotations

import os
import sys
import uuid
from typing import Optional, TextIO


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def issue_command(command: str, message: str, stream: Optional[TextIO] = None) -> None:
    out = stream or sys.stdout
    out.write(f"::{command}::{escape_data(message)}\n")
    out.flush()


def set_failed(message: str, stream: Optional[TextIO] = None) -> int:
    """Report a failed step and return the exit code the process should use."""
    issue_command("error", message, stream)
    return 1


def set_output(name: str, value: str, env: Optional[dict[str, str]] = None) -> bool:
    """Append a step output. Returns False when not running under Actions."""
    path = (env if env is not None else os.environ).get("GITHUB_OUTPUT", "")
    if not path:
        return False

    if "\n" in value:
        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        entry = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
    else:
        entry = f"{name}={value}\n"
    with open(path, "a", encoding="utf-8") as handle:
        handle.write(entry)
    return True


def append_summary(markdown: str, env: Optional[dict[str, str]] = None) -> bool:
    path = (env if env is not None else os.environ).get("GITHUB_STEP_SUMMARY", "")
    if not path:
        return False
    with open(path, "a", encoding="utf-8") as handle:
        handle.write(markdown.rstrip("\n") + "\n")
    return True
