"""Step outputs and workflow commands for the Actions runner."""

from __future__ import annotations

import logging
import os
import secrets
from pathlib import Path
from typing import Mapping


LOGGER = logging.getLogger(__name__)

GITHUB_OUTPUT_ENV = "GITHUB_OUTPUT"


def _escape_command_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def error_annotation(message: str) -> str:
    return f"::error::{_escape_command_data(str(message))}"


def set_output(name: str, value: str, env: Mapping[str, str] | None = None) -> None:
    source = os.environ if env is None else env
    output_path = str(source.get(GITHUB_OUTPUT_ENV, "")).strip()
    if not output_path:
        LOGGER.debug("%s not set; output %s=%r", GITHUB_OUTPUT_ENV, name, value)
        return

    text = str(value)
    delimiter = f"ghadelimiter_{secrets.token_hex(8)}"
    while delimiter in text:
        delimiter = f"ghadelimiter_{secrets.token_hex(8)}"
    with Path(output_path).open("a", encoding="utf-8") as handle:
        handle.write(f"{name}<<{delimiter}\n{text}\n{delimiter}\n")
