from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .errors import StagingError
from .inputs import ActionInputs


LOGGER = logging.getLogger(__name__)

HOST_CONFIG_DIR_NAME = "roc-config-action"


@dataclass(frozen=True)
class StagedPaths:
    config_dir: Path
    output_dir: Path
    pattern_file: Path


def _resolve_under_workspace(workspace: Path, value: str) -> Path:
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return (workspace / path).resolve()


def _read_pattern_source(inputs: ActionInputs, workspace: Path) -> bytes:
    if inputs.patterns_yaml is not None:
        return inputs.patterns_yaml.encode("utf-8")
    source = _resolve_under_workspace(workspace, str(inputs.patterns_file or ""))
    try:
        return source.read_bytes()
    except OSError as exc:
        raise StagingError(f"Unable to read patterns file {source}: {exc}") from exc


def stage_host(inputs: ActionInputs) -> StagedPaths:
    """Create the host config and output directories and write the pattern file.

    Both directories are created if missing. The pattern file is overwritten
    on every run with exactly the bytes the caller supplied.
    """
    if inputs.workspace is None:
        raise StagingError("Workspace root is not defined (set GITHUB_WORKSPACE or pass --workspace).")
    workspace = inputs.workspace.resolve()

    config_dir = workspace / HOST_CONFIG_DIR_NAME
    output_dir = _resolve_under_workspace(workspace, inputs.output_dir_host_path)
    pattern_file = config_dir / inputs.pattern_file_name

    content = _read_pattern_source(inputs, workspace)
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
        output_dir.mkdir(parents=True, exist_ok=True)
        pattern_file.write_bytes(content)
    except OSError as exc:
        raise StagingError(f"Unable to stage ROC config under {workspace}: {exc}") from exc

    LOGGER.info("Host config dir: %s", config_dir)
    LOGGER.info("Host output dir: %s", output_dir)
    LOGGER.info("Patterns file written to: %s (%d bytes)", pattern_file, len(content))
    return StagedPaths(config_dir=config_dir, output_dir=output_dir, pattern_file=pattern_file)
