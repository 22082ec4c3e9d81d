from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from release_tools.handoff import (
    NO_UNRESOLVED_FILES,
    default_handoff_path,
    render_handoff,
    write_handoff,
)


class HandoffTests(unittest.TestCase):
    def test_render_lists_unresolved_files(self) -> None:
        text = render_handoff(
            repo_root=Path("/work/openclaw"),
            target_branch="main",
            source_ref="upstream/main",
            unresolved_files=["src/a.ts", "package.json"],
        )
        self.assertIn("- Target branch: main", text)
        self.assertIn("- Source ref: upstream/main", text)
        self.assertIn("- src/a.ts\n- package.json\n", text)
        self.assertIn("   git push origin main", text)
        self.assertTrue(text.endswith("\n"))

    def test_render_placeholder_when_no_files(self) -> None:
        text = render_handoff(
            repo_root=Path("/work/openclaw"),
            target_branch="main",
            source_ref="upstream/main",
            unresolved_files=[],
        )
        self.assertIn(f"- {NO_UNRESOLVED_FILES}", text)

    def test_default_path(self) -> None:
        path = default_handoff_path(Path("/work/openclaw"), "main", "main")
        self.assertEqual(path, Path("/work/openclaw/tmp/codex-handoff-main-main.md"))

    def test_write_creates_parent_dirs(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = default_handoff_path(Path(tmp), "release", "release-sync/v2026.2.14")
            written = write_handoff(
                path,
                repo_root=Path(tmp),
                target_branch="release-sync/v2026.2.14",
                source_ref="v2026.2.14",
                unresolved_files=["README.md"],
            )
            self.assertEqual(written, path)
            self.assertEqual(path.parent, Path(tmp) / "tmp")
            self.assertEqual(path.name, "codex-handoff-release-release-sync-v2026.2.14.md")
            self.assertIn("- README.md", path.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
