"""
Script: release_tools/git.py
What: Thin wrapper over the `git` commands used by the sync and verify commands.
Doing: Runs tag/branch lookups, fetch, checkout, merge, tag, and push in one repository.
Why: Keeps the command modules free of raw git argument lists so they can be tested with fakes.
Goal: Give every git call a plain-value return (bool, list, or CommandResult).
"""

from __future__ import annotations

from release_tools.common import CommandResult, run_cmd, try_cmd


class GitRepo:
    """Run git commands against one working tree."""

    def __init__(self, cwd: str | None = None) -> None:
        self.cwd = cwd

    def _git(self, *args: str) -> str:
        return run_cmd(["git", *args], cwd=self.cwd)

    def _try(self, *args: str) -> CommandResult:
        return try_cmd(["git", *args], cwd=self.cwd)

    def _stream(self, *args: str) -> None:
        # Let long-running commands print progress straight to the terminal.
        run_cmd(["git", *args], cwd=self.cwd, capture_output=False)

    # Lookups

    def is_inside_work_tree(self) -> bool:
        return self._try("rev-parse", "--is-inside-work-tree").ok

    def toplevel(self) -> str:
        return self._git("rev-parse", "--show-toplevel").strip()

    def is_clean(self) -> bool:
        return self._git("status", "--porcelain").strip() == ""

    def list_tags_by_recency(self) -> list[str]:
        """Return local tag names, most recently created first."""
        output = self._git(
            "for-each-ref",
            "refs/tags",
            "--format=%(refname:short)",
            "--sort=-creatordate",
        )
        return [line.strip() for line in output.splitlines() if line.strip()]

    def ref_exists(self, ref: str) -> bool:
        return self._try("rev-parse", "-q", "--verify", ref).ok

    def local_tag_exists(self, name: str) -> bool:
        return self.ref_exists(f"refs/tags/{name}")

    def local_branch_exists(self, name: str) -> bool:
        return self._try("show-ref", "--verify", "--quiet", f"refs/heads/{name}").ok

    def remote_branch_exists(self, name: str, remote: str = "origin") -> bool:
        return self._try("ls-remote", "--exit-code", "--heads", remote, name).ok

    def remote_tag_exists(self, name: str, remote: str = "origin") -> bool:
        return self._try("ls-remote", "--exit-code", "--tags", "--refs", remote, name).ok

    def unresolved_files(self) -> list[str]:
        """Files git still reports as unmerged after a failed merge."""
        result = self._try("diff", "--name-only", "--diff-filter=U")
        if not result.ok:
            return []
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    # Mutations

    def fetch(self, remote: str, *, tags: bool = False) -> None:
        args = ["fetch", "--prune", remote]
        if tags:
            args.append("--tags")
        self._stream(*args)

    def checkout(self, branch: str) -> None:
        self._stream("checkout", branch)

    def create_branch(self, name: str, start_point: str) -> None:
        self._stream("checkout", "-b", name, start_point)

    def pull_rebase(self, remote: str, branch: str) -> None:
        self._stream("pull", "--rebase", remote, branch)

    def merge(self, ref: str) -> CommandResult:
        """Merge `ref` with a merge commit; failure is returned, not raised."""
        return try_cmd(["git", "merge", "--no-ff", "--no-edit", ref], cwd=self.cwd, capture_output=False)

    def push(self, remote: str, ref: str, *, set_upstream: bool = False) -> None:
        args = ["push"]
        if set_upstream:
            args.append("-u")
        args.extend([remote, ref])
        self._stream(*args)

    def create_annotated_tag(self, name: str, message: str) -> None:
        self._git("tag", "-a", name, "-m", message)
