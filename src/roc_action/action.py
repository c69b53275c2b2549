from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

import click

from .artifacts import Artifact, collect_artifacts, echo_artifacts
from .inputs import ActionInputs
from .launcher import build_run_args, launch_container
from .monitor import (
    DEFAULT_MONITOR_ATTEMPTS,
    DEFAULT_MONITOR_INTERVAL_SECONDS,
    DEFAULT_TRAFFIC_SETTLE_SECONDS,
    Sleep,
    fetch_logs,
    simulate_traffic,
    wait_for_container,
)
from .runtime import DockerRuntime
from .staging import stage_host


LOGGER = logging.getLogger(__name__)


@dataclass
class ActionResult:
    container_name: str
    container_id: str = ""
    status: str | None = None
    logs: str = ""
    artifacts: list[Artifact] = field(default_factory=list)

    @property
    def output_files(self) -> str:
        return "\n".join(artifact.name for artifact in self.artifacts)


def cleanup_container(runtime: DockerRuntime, name: str) -> None:
    """Stop and remove *name*; never raises."""
    for step, call in (("stop", runtime.stop), ("rm", runtime.remove)):
        try:
            result = call(name)
        except Exception as exc:
            LOGGER.debug("docker %s %s raised during cleanup: %s", step, name, exc)
            continue
        if not result.ok:
            LOGGER.debug("docker %s %s exited %d: %s", step, name, result.returncode, result.detail())


def _echo_logs(heading: str, logs: str) -> None:
    click.echo(heading)
    if logs:
        click.echo(logs.rstrip("\n"))


def run_action(
    inputs: ActionInputs,
    runtime: DockerRuntime,
    *,
    monitor_attempts: int = DEFAULT_MONITOR_ATTEMPTS,
    monitor_interval: float = DEFAULT_MONITOR_INTERVAL_SECONDS,
    traffic_settle_seconds: float = DEFAULT_TRAFFIC_SETTLE_SECONDS,
    sleep: Sleep = time.sleep,
) -> ActionResult:
    """Stage, launch, watch and collect, then tear the container down.

    Cleanup runs exactly once whether or not an earlier step failed, and a
    cleanup failure never replaces the error that is already propagating.
    """
    result = ActionResult(container_name=inputs.container_name)
    try:
        staged = stage_host(inputs)
        result.container_id = launch_container(runtime, build_run_args(inputs, staged))

        result.status = wait_for_container(
            runtime,
            inputs.container_name,
            attempts=monitor_attempts,
            interval=monitor_interval,
            sleep=sleep,
        )
        result.logs = fetch_logs(runtime, inputs.container_name)
        _echo_logs("Fetching ROC container logs...", result.logs)

        if inputs.simulate_traffic:
            captured = simulate_traffic(
                runtime,
                inputs.container_name,
                settle_seconds=traffic_settle_seconds,
                sleep=sleep,
            )
            for logs in captured:
                _echo_logs("Fetching ROC container logs again...", logs)
            if captured and captured[-1]:
                result.logs = captured[-1]

        click.echo("Checking for output files in host output directory...")
        result.artifacts = collect_artifacts(staged.output_dir)
        echo_artifacts(result.artifacts, staged.output_dir)
        return result
    finally:
        if inputs.keep_container:
            LOGGER.info("Leaving container %s running (keep_container set)", inputs.container_name)
        else:
            cleanup_container(runtime, inputs.container_name)
