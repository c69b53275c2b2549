from __future__ import annotations

import re
import unittest
from pathlib import Path

import runtime_fakes  # noqa: F401
from roc_action.inputs import input_env_var


ROOT = Path(__file__).resolve().parents[1]
ACTION_MANIFEST = ROOT / "action.yml"
VENV_DIR = "${{ runner.temp }}/roc-action-venv"


class ActionManifestTests(unittest.TestCase):
    def setUp(self) -> None:
        self.content = ACTION_MANIFEST.read_text(encoding="utf-8")

    def test_installs_into_private_venv(self) -> None:
        self.assertIn(f'python3 -m venv "{VENV_DIR}"', self.content)
        self.assertIn(f'"{VENV_DIR}/bin/python" -m pip install', self.content)
        self.assertNotRegex(self.content, r"(?m)^\s*run: python3 -m pip install")

    def test_runs_console_script_from_venv(self) -> None:
        self.assertIn(f'run: "{VENV_DIR}/bin/roc-action"', self.content)
        self.assertNotRegex(self.content, r"(?m)^\s*run: roc-action\s*$")

    def test_every_input_is_exported_to_the_step(self) -> None:
        inputs_block = self.content.split("\noutputs:", 1)[0]
        names = re.findall(r"(?m)^  ([a-z_]+):\s*$", inputs_block)
        self.assertIn("server_url", names)
        for name in names:
            self.assertIn(f"{input_env_var(name)}: ${{{{ inputs.{name} }}}}", self.content)
