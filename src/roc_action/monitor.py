from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Sequence

from .runtime import DockerRuntime


LOGGER = logging.getLogger(__name__)

DEFAULT_MONITOR_ATTEMPTS = 30
DEFAULT_MONITOR_INTERVAL_SECONDS = 10.0
DEFAULT_TRAFFIC_SETTLE_SECONDS = 20.0
TERMINAL_STATUSES = frozenset({"running", "exited"})

Sleep = Callable[[float], None]


@dataclass(frozen=True)
class TrafficRound:
    label: str
    script: str


DEFAULT_TRAFFIC_ROUNDS: tuple[TrafficRound, ...] = (
    TrafficRound(
        label="Simulating network traffic",
        script=(
            "curl -s https://example.com > /dev/null || true; "
            'curl -s -X POST "https://httpbin.org/post?test=12345667788764" '
            "-H \"Content-Type: application/json\" -d '{\"data\":\"12345667788764\"}' > /dev/null || true"
        ),
    ),
    TrafficRound(
        label="Simulating more network traffic",
        script=(
            'curl -s -X POST "https://example.com?more=12345667788764" '
            "-H \"Content-Type: application/json\" -d '{\"info\":\"12345667788764\"}' > /dev/null || true"
        ),
    ),
)


def wait_for_container(
    runtime: DockerRuntime,
    name: str,
    *,
    attempts: int = DEFAULT_MONITOR_ATTEMPTS,
    interval: float = DEFAULT_MONITOR_INTERVAL_SECONDS,
    sleep: Sleep = time.sleep,
) -> str | None:
    """Poll the container status until it is running or exited.

    Returns the terminal status that ended the poll, or ``None`` when
    *attempts* polls went by without one. There is no sleep after the last
    attempt.
    """
    attempts = max(1, int(attempts))
    for attempt in range(1, attempts + 1):
        result = runtime.inspect_status(name)
        if result.ok:
            status = result.stdout.strip().lower()
            LOGGER.debug("Container %s status=%s (attempt %d/%d)", name, status or "<empty>", attempt, attempts)
            if status in TERMINAL_STATUSES:
                LOGGER.info("Container %s is %s", name, status)
                return status
        else:
            LOGGER.warning("Unable to inspect container %s: %s", name, result.detail())
        if attempt < attempts:
            sleep(interval)

    LOGGER.warning("Container %s did not reach running or exited after %d checks", name, attempts)
    listing = runtime.ps(name)
    if listing.ok and listing.stdout.strip():
        LOGGER.warning("docker ps: %s", listing.stdout.strip())
    return None


def fetch_logs(runtime: DockerRuntime, name: str) -> str:
    """Return the container's combined stdout and stderr, or ``""`` on failure."""
    result = runtime.logs(name)
    if not result.ok:
        LOGGER.warning("Unable to fetch logs for container %s: %s", name, result.detail())
        return ""
    # docker logs replays the container's stderr on its own stderr.
    return "".join(part for part in (result.stdout, result.stderr) if part)


def simulate_traffic(
    runtime: DockerRuntime,
    name: str,
    *,
    rounds: Sequence[TrafficRound] = DEFAULT_TRAFFIC_ROUNDS,
    settle_seconds: float = DEFAULT_TRAFFIC_SETTLE_SECONDS,
    sleep: Sleep = time.sleep,
) -> list[str]:
    """Run each traffic round inside the container, then capture logs.

    Returns the logs captured after each round, in order.
    """
    captured: list[str] = []
    for traffic in rounds:
        LOGGER.info("%s...", traffic.label)
        result = runtime.exec_shell(name, traffic.script)
        if not result.ok:
            LOGGER.warning("%s failed in container %s: %s", traffic.label, name, result.detail())
        sleep(settle_seconds)
        captured.append(fetch_logs(runtime, name))
    return captured
