from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Sequence

from .errors import LaunchError
from .inputs import ActionInputs
from .runtime import DockerRuntime
from .staging import StagedPaths


LOGGER = logging.getLogger(__name__)

CONTAINER_CONFIG_DIR = "/tmp/roc-config"
CONTAINER_WATCH_DIR = "/tmp/roc-output"
CONTAINER_LIB_DIR = "/usr/lib64"
SHARED_LIBRARY_NAMES = ("libssl", "libcrypto")
MASKED_VALUE = "***"


def container_pattern_path(inputs: ActionInputs) -> str:
    return str(PurePosixPath(CONTAINER_CONFIG_DIR) / inputs.pattern_file_name)


def shared_library_mounts(host_lib_dir: str, version: str) -> list[str]:
    mounts: list[str] = []
    host_dir = PurePosixPath(host_lib_dir)
    for library in SHARED_LIBRARY_NAMES:
        file_name = f"{library}.so.{version}"
        mounts.append(f"{host_dir / file_name}:{PurePosixPath(CONTAINER_LIB_DIR) / file_name}")
    return mounts


def build_run_args(inputs: ActionInputs, staged: StagedPaths) -> list[str]:
    """Arguments for ``docker run`` that start ROC detached.

    ROC reads its patterns from, and writes its findings to, fixed paths
    inside the container; the host directories are bind-mounted onto them.
    """
    volumes = [
        "/proc:/proc",
        "/sys:/sys",
        *shared_library_mounts(inputs.host_lib_dir, inputs.ssl_lib_version),
        f"{staged.config_dir}:{CONTAINER_CONFIG_DIR}:ro",
        f"{staged.output_dir}:{CONTAINER_WATCH_DIR}",
    ]
    run_args = [
        "run",
        "-d",
        "--name",
        inputs.container_name,
        "--privileged",
        "--pid=host",
        "--network=host",
    ]
    for volume in volumes:
        run_args.extend(["-v", volume])
    run_args.extend(inputs.extra_docker_args)
    run_args.extend(
        [
            inputs.docker_image,
            "--server-url",
            inputs.server_url,
            "--api-key",
            inputs.api_key,
            "--patterns",
            container_pattern_path(inputs),
            "--watch",
            CONTAINER_WATCH_DIR,
        ]
    )
    run_args.extend(inputs.extra_roc_args)
    return [arg for arg in run_args if arg != ""]


def masked_command(args: Sequence[str]) -> str:
    parts = list(args)
    for index, arg in enumerate(parts[:-1]):
        if arg == "--api-key":
            parts[index + 1] = MASKED_VALUE
    return " ".join(parts)


def launch_container(runtime: DockerRuntime, run_args: Sequence[str]) -> str:
    """Start the container and return the id printed by ``docker run -d``."""
    LOGGER.info("Running Docker command: %s %s", runtime.binary, masked_command(run_args))
    result = runtime.run(run_args)
    if not result.ok:
        raise LaunchError(
            f"Docker run failed with exit code {result.returncode}: {result.detail()}",
            returncode=result.returncode,
        )
    container_id = result.stdout.strip().splitlines()[-1].strip() if result.stdout.strip() else ""
    LOGGER.info("Started container %s", container_id or "<unknown id>")
    return container_id
