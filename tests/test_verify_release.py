from __future__ import annotations

import contextlib
import io
import unittest
from pathlib import Path
from unittest import mock

from fakes import FakeGit, FakePreviews

from release_tools import sync_release
from release_tools.common import AssertionMismatchError, MissingTagError, ResolutionError
from release_tools.verify_release import build_parser, default_docker_dir, run


def _run(git: FakeGit, argv: list[str], previews: FakePreviews) -> tuple[str, list[Path]]:
    args = build_parser().parse_args(argv)
    docker_dirs: list[Path] = []

    def _factory(docker_dir: Path) -> FakePreviews:
        docker_dirs.append(docker_dir)
        return previews

    out = io.StringIO()
    with contextlib.redirect_stdout(out):
        run(args, git, preview_factory=_factory)
    return out.getvalue(), docker_dirs


class VerifyReleaseTests(unittest.TestCase):
    def test_latest_fork_tag_passes(self) -> None:
        git = FakeGit(
            tags=["vida-v2026.3.1", "vida-v2026.2.14"],
            remote_tags={"vida-v2026.3.1"},
        )
        previews = FakePreviews.passing("vida-v2026.3.1", "2026-03-01")

        output, docker_dirs = _run(git, [], previews)

        self.assertIn("- fork tag: vida-v2026.3.1", output)
        self.assertIn("- expected docker tag: 2026-03-01", output)
        self.assertTrue(output.rstrip().endswith("Verification passed."))
        self.assertEqual(docker_dirs, [Path("/work/openclaw-docker")])

    def test_openclaw_ref_override(self) -> None:
        git = FakeGit(tags=["vida-v2026.2.14"], remote_tags={"vida-v2026.2.14"})
        previews = FakePreviews.passing("feature/x", "feature-x")

        output, _dirs = _run(git, ["--openclaw-ref", "feature/x", "--docker-dir", "/d"], previews)

        self.assertIn("- expected docker tag: feature-x", output)
        self.assertEqual(previews.calls, [("build", "feature/x"), ("push", "feature/x")])

    def test_missing_remote_tag(self) -> None:
        git = FakeGit(tags=["vida-v2026.2.14"])
        previews = FakePreviews({})
        with self.assertRaises(MissingTagError):
            _run(git, [], previews)
        self.assertEqual(previews.calls, [])

    def test_missing_local_tag_is_only_a_warning(self) -> None:
        git = FakeGit(remote_tags={"vida-v2026.2.14"})
        previews = FakePreviews.passing("vida-v2026.2.14", "2026-02-14")

        output, _dirs = _run(git, ["--fork-tag", "vida-v2026.2.14"], previews)

        self.assertIn("Warning: local tag 'vida-v2026.2.14' not found.", output)

    def test_skip_docker(self) -> None:
        git = FakeGit(tags=["vida-v2026.2.14"], remote_tags={"vida-v2026.2.14"})
        previews = FakePreviews({})

        output, docker_dirs = _run(git, ["--skip-docker"], previews)

        self.assertIn("Skipped docker compatibility checks (--skip-docker).", output)
        self.assertEqual(docker_dirs, [])
        self.assertEqual(previews.calls, [])

    def test_mismatch_raises_with_all_failures(self) -> None:
        git = FakeGit(tags=["vida-v2026.2.14"], remote_tags={"vida-v2026.2.14"})
        previews = FakePreviews({"build": "", "push": ""})

        with self.assertRaises(AssertionMismatchError) as ctx:
            _run(git, [], previews)
        self.assertEqual(len(ctx.exception.failures), 7)

    def test_no_fork_tag_found(self) -> None:
        with self.assertRaises(ResolutionError):
            _run(FakeGit(tags=["v2026.2.14"]), [], FakePreviews({}))

    def test_prefix_env_matches_release_sync(self) -> None:
        git = FakeGit(tags=["v2026.2.14"], refs={"origin/main"})
        previews = FakePreviews.passing("acme-v2026.2.14", "2026-02-14")

        with mock.patch.dict("os.environ", {"VIDA_FORK_TAG_PREFIX": "acme-"}):
            sync_args = sync_release.build_parser().parse_args(["--docker-dir", "/d"])
            with contextlib.redirect_stdout(io.StringIO()):
                sync_release.run(sync_args, git, preview_factory=lambda _docker_dir: previews)
            output, _dirs = _run(git, ["--fork-tag", "acme-v2026.2.14", "--docker-dir", "/d"], previews)

        self.assertIn("- expected docker tag: 2026-02-14", output)
        self.assertTrue(output.rstrip().endswith("Verification passed."))

    def test_prefix_option(self) -> None:
        git = FakeGit(remote_tags={"acme-v2026.3.1"})
        previews = FakePreviews.passing("acme-v2026.3.1", "2026-03-01")

        output, _dirs = _run(
            git,
            ["--fork-tag", "acme-v2026.3.1", "--fork-tag-prefix", "acme-"],
            previews,
        )

        self.assertIn("- expected docker tag: 2026-03-01", output)

    def test_default_docker_dir_env_override(self) -> None:
        with mock.patch.dict("os.environ", {"OPENCLAW_DOCKER_DIR": "/srv/docker"}):
            self.assertEqual(default_docker_dir(FakeGit()), Path("/srv/docker"))


if __name__ == "__main__":
    unittest.main()
