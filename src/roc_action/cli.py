from __future__ import annotations

import logging
import os
import shutil
import sys

import click

from .action import run_action
from .errors import RocActionError
from .inputs import (
    DEFAULT_CONTAINER_NAME,
    DEFAULT_DOCKER_IMAGE,
    DEFAULT_HOST_LIB_DIR,
    DEFAULT_OUTPUT_DIR_HOST_PATH,
    DEFAULT_SSL_LIB_VERSION,
    input_env_var,
    resolve_inputs,
)
from .monitor import (
    DEFAULT_MONITOR_ATTEMPTS,
    DEFAULT_MONITOR_INTERVAL_SECONDS,
    DEFAULT_TRAFFIC_SETTLE_SECONDS,
)
from .outputs import error_annotation, set_output
from .runtime import DEFAULT_DOCKER_BIN, DockerRuntime


LOGGER = logging.getLogger("roc_action")

LOG_LEVEL_CHOICES = ("debug", "info", "warning", "error")
RUNNER_DEBUG_ENV = "RUNNER_DEBUG"


def _normalize_log_level(value: str | None) -> str:
    normalized = str(value or "").strip().lower()
    if os.environ.get(RUNNER_DEBUG_ENV, "").strip() == "1":
        return "debug"
    if normalized in LOG_LEVEL_CHOICES:
        return normalized
    return "info"


def configure_logging(level: str | None) -> None:
    normalized = _normalize_log_level(level)
    handler = logging.StreamHandler(sys.__stderr__)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    LOGGER.handlers.clear()
    LOGGER.addHandler(handler)
    LOGGER.setLevel(getattr(logging, normalized.upper(), logging.INFO))
    LOGGER.propagate = False


@click.command(help="Run the ROC observability container, collect its logs and output files, then remove it.")
@click.option("--server-url", envvar=input_env_var("server_url"), default=None, help="ROC server URL (required)")
@click.option("--api-key", envvar=input_env_var("api_key"), default=None, help="ROC API key (required)")
@click.option("--patterns-yaml", envvar=input_env_var("patterns_yaml"), default=None, help="Pattern file content")
@click.option(
    "--patterns-file",
    envvar=input_env_var("patterns_file"),
    default=None,
    help="Pattern file path, relative to the workspace. Used when --patterns-yaml is not given.",
)
@click.option("--docker-image", envvar=input_env_var("docker_image"), default=DEFAULT_DOCKER_IMAGE, show_default=True)
@click.option(
    "--container-name",
    envvar=input_env_var("container_name"),
    default=DEFAULT_CONTAINER_NAME,
    show_default=True,
)
@click.option(
    "--output-dir-host-path",
    envvar=input_env_var("output_dir_host_path"),
    default=DEFAULT_OUTPUT_DIR_HOST_PATH,
    show_default=True,
    help="Host directory ROC output is written to, relative to the workspace",
)
@click.option(
    "--extra-docker-args",
    envvar=input_env_var("extra_docker_args"),
    default="",
    help="Additional docker run arguments, inserted before the image",
)
@click.option(
    "--extra-roc-args",
    envvar=input_env_var("extra_roc_args"),
    default="",
    help="Additional ROC flags, appended after --watch",
)
@click.option("--host-lib-dir", envvar=input_env_var("host_lib_dir"), default=DEFAULT_HOST_LIB_DIR, show_default=True)
@click.option(
    "--ssl-lib-version",
    envvar=input_env_var("ssl_lib_version"),
    default=DEFAULT_SSL_LIB_VERSION,
    show_default=True,
    help="Suffix of the libssl/libcrypto files mounted into the container",
)
@click.option(
    "--simulate-traffic/--no-simulate-traffic",
    envvar=input_env_var("simulate_traffic"),
    default=False,
    show_default=True,
    help="Generate HTTP traffic inside the container after it starts",
)
@click.option(
    "--keep-container/--no-keep-container",
    envvar=input_env_var("keep_container"),
    default=False,
    show_default=True,
    help="Skip the final stop/rm (local debugging)",
)
@click.option(
    "--workspace",
    envvar="GITHUB_WORKSPACE",
    default=None,
    help="Workspace root that config and output directories are created under",
)
@click.option("--docker-bin", default=DEFAULT_DOCKER_BIN, show_default=True)
@click.option("--monitor-attempts", default=DEFAULT_MONITOR_ATTEMPTS, show_default=True, type=click.IntRange(min=1))
@click.option(
    "--monitor-interval",
    default=DEFAULT_MONITOR_INTERVAL_SECONDS,
    show_default=True,
    type=click.FloatRange(min=0),
)
@click.option(
    "--traffic-settle-seconds",
    default=DEFAULT_TRAFFIC_SETTLE_SECONDS,
    show_default=True,
    type=click.FloatRange(min=0),
)
@click.option(
    "--log-level",
    envvar=input_env_var("log_level"),
    default="info",
    show_default=True,
    type=click.Choice(LOG_LEVEL_CHOICES, case_sensitive=False),
)
def main(
    server_url: str | None,
    api_key: str | None,
    patterns_yaml: str | None,
    patterns_file: str | None,
    docker_image: str,
    container_name: str,
    output_dir_host_path: str,
    extra_docker_args: str,
    extra_roc_args: str,
    host_lib_dir: str,
    ssl_lib_version: str,
    simulate_traffic: bool,
    keep_container: bool,
    workspace: str | None,
    docker_bin: str,
    monitor_attempts: int,
    monitor_interval: float,
    traffic_settle_seconds: float,
    log_level: str,
) -> None:
    configure_logging(log_level)
    try:
        inputs = resolve_inputs(
            {
                "server_url": server_url,
                "api_key": api_key,
                "patterns_yaml": patterns_yaml,
                "patterns_file": patterns_file,
                "docker_image": docker_image,
                "container_name": container_name,
                "output_dir_host_path": output_dir_host_path,
                "extra_docker_args": extra_docker_args,
                "extra_roc_args": extra_roc_args,
                "host_lib_dir": host_lib_dir,
                "ssl_lib_version": ssl_lib_version,
                "simulate_traffic": simulate_traffic,
                "keep_container": keep_container,
            },
            workspace=workspace,
        )
        if shutil.which(docker_bin) is None:
            raise RocActionError(f"{docker_bin} command not found in PATH")

        result = run_action(
            inputs,
            DockerRuntime(docker_bin),
            monitor_attempts=monitor_attempts,
            monitor_interval=monitor_interval,
            traffic_settle_seconds=traffic_settle_seconds,
        )
    except RocActionError as exc:
        click.echo(error_annotation(exc.format_message()))
        raise

    set_output("container_name", result.container_name)
    set_output("container_id", result.container_id)
    set_output("output_files", result.output_files)
    set_output("logs", result.logs)
    if result.status is None:
        click.echo(f"Container {result.container_name} never reported running or exited.")


if __name__ == "__main__":
    main()
