from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

import runtime_fakes  # noqa: F401
from roc_action.outputs import error_annotation, set_output


class SetOutputTests(unittest.TestCase):
    def test_appends_multiline_value_with_delimiter(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            output_file = Path(tmp) / "github_output"
            output_file.write_text("existing=1\n", encoding="utf-8")
            env = {"GITHUB_OUTPUT": str(output_file)}

            set_output("container_name", "roc-action-container", env=env)
            set_output("output_files", "a.log\nb.json", env=env)

            lines = output_file.read_text(encoding="utf-8").splitlines()

        self.assertEqual(lines[0], "existing=1")
        name, _, delimiter = lines[1].partition("<<")
        self.assertEqual(name, "container_name")
        self.assertEqual(lines[2:4], ["roc-action-container", delimiter])
        name, _, delimiter = lines[4].partition("<<")
        self.assertEqual(name, "output_files")
        self.assertEqual(lines[5:8], ["a.log", "b.json", delimiter])

    def test_without_output_file_nothing_is_written(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            set_output("logs", "text", env={})
            self.assertEqual(list(Path(tmp).iterdir()), [])


class ErrorAnnotationTests(unittest.TestCase):
    def test_escapes_workflow_command_data(self) -> None:
        self.assertEqual(
            error_annotation("100% failed\r\nsee logs"),
            "::error::100%25 failed%0D%0Asee logs",
        )
