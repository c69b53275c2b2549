from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Mapping

import click

from .errors import InvalidInputError, MissingInputError


DEFAULT_DOCKER_IMAGE = "roc-agent:latest"
DEFAULT_CONTAINER_NAME = "roc-action-container"
DEFAULT_OUTPUT_DIR_HOST_PATH = "./roc-action-output"
DEFAULT_HOST_LIB_DIR = "/lib/x86_64-linux-gnu"
DEFAULT_SSL_LIB_VERSION = "3"
DEFAULT_PATTERN_FILE_NAME = "pattern.yaml"
INPUT_ENV_PREFIX = "INPUT_"
REQUIRED_INPUTS = ("server_url", "api_key")
PATTERN_INPUTS = ("patterns_yaml", "patterns_file")
TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def input_env_var(name: str) -> str:
    """Environment variable the Actions runner uses for input *name*."""
    return INPUT_ENV_PREFIX + name.replace(" ", "_").upper()


def _clean(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _parse_bool(name: str, value: object, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    text = _clean(value).lower()
    if not text:
        return default
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise click.BadParameter(f"expected true or false, got {value!r}", param_hint=name)


def _split_args(name: str, value: object) -> tuple[str, ...]:
    try:
        tokens = shlex.split(_clean(value))
    except ValueError as exc:
        raise InvalidInputError(name, f"{exc} in {value!r}") from exc
    return tuple(token for token in tokens if token)


@dataclass(frozen=True)
class ActionInputs:
    server_url: str
    api_key: str
    patterns_yaml: str | None = None
    patterns_file: str | None = None
    docker_image: str = DEFAULT_DOCKER_IMAGE
    container_name: str = DEFAULT_CONTAINER_NAME
    output_dir_host_path: str = DEFAULT_OUTPUT_DIR_HOST_PATH
    extra_docker_args: tuple[str, ...] = ()
    extra_roc_args: tuple[str, ...] = ()
    host_lib_dir: str = DEFAULT_HOST_LIB_DIR
    ssl_lib_version: str = DEFAULT_SSL_LIB_VERSION
    simulate_traffic: bool = False
    keep_container: bool = False
    workspace: Path | None = field(default=None)

    @property
    def pattern_file_name(self) -> str:
        # Inline content takes precedence over a file path.
        if self.patterns_yaml is None and self.patterns_file:
            return PurePosixPath(self.patterns_file.replace("\\", "/")).name
        return DEFAULT_PATTERN_FILE_NAME


def resolve_inputs(raw: Mapping[str, object], *, workspace: str | Path | None = None) -> ActionInputs:
    """Build :class:`ActionInputs` from raw input values.

    Empty strings count as unset, because the runner exports every declared
    input, even the ones the workflow leaves out. Required inputs are checked
    all at once so the error names each missing one.
    """
    values = {key: _clean(value) for key, value in raw.items() if not isinstance(value, bool)}

    missing = [name for name in REQUIRED_INPUTS if not values.get(name)]
    if not any(values.get(name) for name in PATTERN_INPUTS):
        missing.append(" or ".join(PATTERN_INPUTS))
    if missing:
        raise MissingInputError(missing)

    # The pattern document is written verbatim, so keep its whitespace.
    raw_patterns = raw.get("patterns_yaml")
    patterns_yaml = str(raw_patterns) if raw_patterns is not None and _clean(raw_patterns) else None

    workspace_value = _clean(workspace)
    return ActionInputs(
        server_url=values["server_url"],
        api_key=values["api_key"],
        patterns_yaml=patterns_yaml,
        patterns_file=values.get("patterns_file") or None,
        docker_image=values.get("docker_image") or DEFAULT_DOCKER_IMAGE,
        container_name=values.get("container_name") or DEFAULT_CONTAINER_NAME,
        output_dir_host_path=values.get("output_dir_host_path") or DEFAULT_OUTPUT_DIR_HOST_PATH,
        extra_docker_args=_split_args("extra_docker_args", values.get("extra_docker_args")),
        extra_roc_args=_split_args("extra_roc_args", values.get("extra_roc_args")),
        host_lib_dir=values.get("host_lib_dir") or DEFAULT_HOST_LIB_DIR,
        ssl_lib_version=values.get("ssl_lib_version") or DEFAULT_SSL_LIB_VERSION,
        simulate_traffic=_parse_bool("simulate_traffic", raw.get("simulate_traffic")),
        keep_container=_parse_bool("keep_container", raw.get("keep_container")),
        workspace=Path(workspace_value).expanduser() if workspace_value else None,
    )
