from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

import runtime_fakes  # noqa: F401
from roc_action.errors import StagingError
from roc_action.inputs import resolve_inputs
from roc_action.staging import HOST_CONFIG_DIR_NAME, stage_host


def _inputs(workspace: Path | None, **overrides: object):
    raw: dict[str, object] = {"server_url": "https://x", "api_key": "k", "patterns_yaml": "a: 1"}
    raw.update(overrides)
    return resolve_inputs(raw, workspace=workspace)


class StageHostTests(unittest.TestCase):
    def test_writes_pattern_content_byte_for_byte(self) -> None:
        content = "rules:\r\n  - name: café\n\ttabbed: true\n\n"
        with tempfile.TemporaryDirectory() as tmp:
            workspace = Path(tmp)
            staged = stage_host(_inputs(workspace, patterns_yaml=content))

            self.assertEqual(staged.config_dir, workspace.resolve() / HOST_CONFIG_DIR_NAME)
            self.assertEqual(staged.output_dir, workspace.resolve() / "roc-action-output")
            self.assertEqual(staged.pattern_file, staged.config_dir / "pattern.yaml")
            self.assertEqual(staged.pattern_file.read_bytes(), content.encode("utf-8"))
            self.assertTrue(staged.output_dir.is_dir())

    def test_staging_is_idempotent_and_overwrites_pattern(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            workspace = Path(tmp)
            stage_host(_inputs(workspace, patterns_yaml="old: content that is longer\n"))
            staged = stage_host(_inputs(workspace, patterns_yaml="new: 1"))

            self.assertEqual(staged.pattern_file.read_text(encoding="utf-8"), "new: 1")

    def test_patterns_file_is_copied_under_its_own_name(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            workspace = Path(tmp)
            (workspace / "p.yaml").write_text("a: 1", encoding="utf-8")
            inputs = resolve_inputs(
                {"server_url": "https://x", "api_key": "k", "patterns_file": "p.yaml"},
                workspace=workspace,
            )
            staged = stage_host(inputs)

            self.assertEqual(staged.pattern_file.name, "p.yaml")
            self.assertEqual(staged.pattern_file.read_text(encoding="utf-8"), "a: 1")

    def test_absolute_output_dir_is_used_as_is(self) -> None:
        with tempfile.TemporaryDirectory() as tmp, tempfile.TemporaryDirectory() as out:
            staged = stage_host(_inputs(Path(tmp), output_dir_host_path=out))
            self.assertEqual(staged.output_dir, Path(out))

    def test_undefined_workspace_fails(self) -> None:
        with self.assertRaises(StagingError) as ctx:
            stage_host(_inputs(None))
        self.assertIn("Workspace root is not defined", ctx.exception.format_message())

    def test_missing_patterns_file_fails(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            inputs = resolve_inputs(
                {"server_url": "https://x", "api_key": "k", "patterns_file": "absent.yaml"},
                workspace=tmp,
            )
            with self.assertRaises(StagingError):
                stage_host(inputs)

    def test_unwritable_config_path_fails(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            workspace = Path(tmp)
            (workspace / HOST_CONFIG_DIR_NAME).write_text("not a directory", encoding="utf-8")
            with self.assertRaises(StagingError):
                stage_host(_inputs(workspace))
