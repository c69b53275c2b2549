from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import click


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Artifact:
    name: str
    content: str


def collect_artifacts(output_dir: Path) -> list[Artifact]:
    """Read every regular file ROC left in *output_dir*.

    A missing or unreadable directory yields an empty list, and an unreadable
    file is skipped; both are logged as warnings.
    """
    try:
        entries = sorted(output_dir.iterdir(), key=lambda entry: entry.name)
    except OSError as exc:
        LOGGER.warning("Unable to list output directory %s: %s", output_dir, exc)
        return []

    artifacts: list[Artifact] = []
    for entry in entries:
        if not entry.is_file():
            continue
        try:
            content = entry.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            LOGGER.warning("Unable to read output file %s: %s", entry, exc)
            continue
        artifacts.append(Artifact(name=entry.name, content=content))
    return artifacts


def echo_artifacts(artifacts: Sequence[Artifact], output_dir: Path) -> None:
    if not artifacts:
        click.echo("No output files found in the host output directory.")
        return
    for artifact in artifacts:
        click.echo(f"Contents of {output_dir / artifact.name}:")
        click.echo(artifact.content)
