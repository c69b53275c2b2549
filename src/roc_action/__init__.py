"""Run the ROC network-observability container as a CI step.

The action stages a pattern file, launches the ROC image with the host
namespaces and bind mounts it needs, waits for it to come up, optionally
drives some HTTP traffic through it, and collects its logs and output files
before removing the container.
"""

import logging

from .action import ActionResult, cleanup_container, run_action
from .inputs import ActionInputs, resolve_inputs

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ActionInputs",
    "ActionResult",
    "cleanup_container",
    "resolve_inputs",
    "run_action",
    "__version__",
]
