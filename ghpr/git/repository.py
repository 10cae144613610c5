"""Local repository access through the git executable.

Contains:
- GitRepository: Read and write the commits, branches and remotes of one
  repository
"""

from pathlib import Path
from typing import Optional, Union

from ghpr.git.exceptions import GitCondition, GitError
from ghpr.git.models import Branch, Commit
from ghpr.git.runner import _run_git_command, get_repo_root

# Fields in git --format output are NUL-separated
_FIELD_SEP = "\x00"


class GitRepository:
    """A local git repository, addressed by its working tree root."""

    def __init__(self, root: Path):
        self.root = root

    @classmethod
    def discover(cls, path: Union[str, Path] = ".") -> "GitRepository":
        """Find the repository containing a path.

        Raises:
            GitError: With condition NOT_A_REPOSITORY if there is none.
        """
        return cls(get_repo_root(path))

    def _git(self, args: list[str]) -> str:
        return _run_git_command(args, cwd=self.root)

    def head_commit(self) -> Commit:
        """Get the commit HEAD points at.

        Raises:
            GitError: With condition UNBORN_BRANCH if there are no commits yet.
        """
        try:
            commit_id = self._git(["rev-parse", "--verify", "--quiet", "HEAD^{commit}"])
        except GitError as e:
            if self.current_branch() is not None:
                raise GitError(
                    "HEAD points at a branch with no commits.",
                    stderr=e.stderr,
                    returncode=e.returncode,
                    condition=GitCondition.UNBORN_BRANCH,
                )
            raise
        return self.find_commit(commit_id)

    def find_commit(self, rev: str) -> Commit:
        """Look up a commit by hash or revision expression."""
        output = self._git(
            ["log", "-1", "--format=%H%x00%P%x00%B", f"{rev}^{{commit}}", "--"]
        )
        commit_id, parents, message = output.split(_FIELD_SEP, 2)
        lines = message.strip().splitlines()
        return Commit(
            id=commit_id,
            parent_ids=tuple(parents.split()),
            summary=lines[0].strip() if lines else None,
        )

    def local_branches(self) -> list[Branch]:
        """List local branches, sorted by ref name."""
        output = self._git(
            [
                "for-each-ref",
                "--sort=refname",
                "--format=%(refname:short)%00%(objectname)",
                "refs/heads",
            ]
        )
        branches = []
        for line in output.splitlines():
            if not line:
                continue
            name, target = line.split(_FIELD_SEP, 1)
            branches.append(Branch(name=name, target=target))
        return branches

    def current_branch(self) -> Optional[str]:
        """Get the branch HEAD is attached to, None if HEAD is detached."""
        try:
            return self._git(["symbolic-ref", "--quiet", "--short", "HEAD"]) or None
        except GitError as e:
            if e.returncode == 1:
                return None
            raise

    def remotes(self) -> list[str]:
        """List the names of configured remotes."""
        output = self._git(["remote"])
        return [line for line in output.splitlines() if line]

    def merge_base(self, first: str, second: str) -> Optional[str]:
        """Get the nearest common ancestor of two commits, None if unrelated."""
        try:
            return self._git(["merge-base", first, second]) or None
        except GitError as e:
            # merge-base exits 1 without output when there is no common ancestor
            if e.returncode == 1 and not e.stderr:
                return None
            raise

    def create_branch(self, name: str, commit_id: str) -> Branch:
        """Create a branch at a commit. Never overwrites an existing branch."""
        self._git(["branch", "--no-track", "--", name, commit_id])
        return Branch(name=name, target=commit_id)

    def set_head(self, branch_name: str) -> None:
        """Attach HEAD to a branch without touching the working tree."""
        self._git(["symbolic-ref", "HEAD", f"refs/heads/{branch_name}"])

    def branch_upstream(self, branch_name: str) -> Optional[str]:
        """Get the upstream configured for a branch.

        Returns:
            The upstream as "<remote>/<branch>", or None if none is configured.

        Raises:
            GitError: If git config cannot be read.
        """
        remote = self._config_value(f"branch.{branch_name}.remote")
        merge = self._config_value(f"branch.{branch_name}.merge")
        if remote is None or merge is None:
            return None
        return f"{remote}/{merge.removeprefix('refs/heads/')}"

    def _config_value(self, key: str) -> Optional[str]:
        try:
            return self._git(["config", "--get", key])
        except GitError as e:
            # git config exits 1 when the key is not set
            if e.returncode == 1:
                return None
            raise
