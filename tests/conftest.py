"""Shared test fixtures and configuration."""

import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Optional

import pytest

from ghpr.git import Branch, Commit, GitCondition, GitError


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def log():
    """A quiet logger for workflow calls."""
    logger = logging.getLogger("tests.workflow")
    logger.setLevel(logging.DEBUG)
    return logger


class FakeRepository:
    """In-memory stand-in for GitRepository.

    Commits are added in order; each new commit's parent defaults to the
    commit HEAD points at, like `git commit`.
    """

    def __init__(self):
        self.commits: dict[str, Commit] = {}
        self.branches: dict[str, str] = {}
        self.head_branch: Optional[str] = "main"
        self.detached_at: Optional[str] = None
        self.remote_names: list[str] = ["origin"]
        self.upstreams: dict[str, str] = {}
        self.fail_create = False
        self.fail_set_head = False
        self.created: list[str] = []

    # Builders

    def commit(self, summary: Optional[str], parents: Optional[list[str]] = None) -> str:
        if parents is None:
            head = self._head_id()
            parents = [head] if head else []
        commit_id = f"{len(self.commits) + 1:040x}"
        self.commits[commit_id] = Commit(id=commit_id, parent_ids=tuple(parents), summary=summary)
        if self.head_branch is not None:
            self.branches[self.head_branch] = commit_id
        else:
            self.detached_at = commit_id
        return commit_id

    def add_branch(self, name: str, commit_id: str, upstream: Optional[str] = None) -> None:
        self.branches[name] = commit_id
        if upstream is not None:
            self.upstreams[name] = upstream

    def checkout(self, name: str) -> None:
        self.head_branch = name
        self.detached_at = None

    def detach(self, commit_id: str) -> None:
        self.head_branch = None
        self.detached_at = commit_id

    def _head_id(self) -> Optional[str]:
        if self.head_branch is not None:
            return self.branches.get(self.head_branch)
        return self.detached_at

    # GitRepository interface

    def head_commit(self) -> Commit:
        head = self._head_id()
        if head is None:
            raise GitError("unborn", condition=GitCondition.UNBORN_BRANCH)
        return self.commits[head]

    def find_commit(self, rev: str) -> Commit:
        if rev not in self.commits:
            raise GitError("fatal: bad revision")
        return self.commits[rev]

    def local_branches(self) -> list[Branch]:
        return [Branch(name=name, target=self.branches[name]) for name in sorted(self.branches)]

    def current_branch(self) -> Optional[str]:
        return self.head_branch

    def remotes(self) -> list[str]:
        return list(self.remote_names)

    def _ancestors(self, commit_id: str) -> list[str]:
        order, queue = [], [commit_id]
        while queue:
            current = queue.pop(0)
            if current in order:
                continue
            order.append(current)
            queue.extend(self.commits[current].parent_ids)
        return order

    def merge_base(self, first: str, second: str) -> Optional[str]:
        first_ancestors = set(self._ancestors(first))
        for commit_id in self._ancestors(second):
            if commit_id in first_ancestors:
                return commit_id
        return None

    def create_branch(self, name: str, commit_id: str) -> Branch:
        if self.fail_create or name in self.branches or not name:
            raise GitError(f"fatal: a branch named '{name}' already exists")
        self.branches[name] = commit_id
        self.created.append(name)
        return Branch(name=name, target=commit_id)

    def set_head(self, branch_name: str) -> None:
        if self.fail_set_head:
            raise GitError("cannot lock ref 'HEAD'")
        self.head_branch = branch_name
        self.detached_at = None

    def branch_upstream(self, branch_name: str) -> Optional[str]:
        return self.upstreams.get(branch_name)


@pytest.fixture
def fake_repo():
    """An in-memory repository with a remote and no commits."""
    return FakeRepository()


class GitRepoBuilder:
    """Builds a real git repository in a temporary directory."""

    def __init__(self, root: Path):
        self.root = root
        self.git("init", "-q")
        self.git("symbolic-ref", "HEAD", "refs/heads/main")

    def git(self, *args: str) -> str:
        env = dict(os.environ)
        env.update(
            {
                "GIT_AUTHOR_NAME": "Test",
                "GIT_AUTHOR_EMAIL": "test@example.com",
                "GIT_COMMITTER_NAME": "Test",
                "GIT_COMMITTER_EMAIL": "test@example.com",
                "GIT_CONFIG_NOSYSTEM": "1",
                "HOME": str(self.root),
            }
        )
        result = subprocess.run(
            ["git", *args],
            cwd=self.root,
            capture_output=True,
            text=True,
            check=True,
            env=env,
        )
        return result.stdout.strip()

    def commit(self, message: str) -> str:
        self.git("commit", "-q", "--allow-empty", "--allow-empty-message", "-m", message)
        return self.git("rev-parse", "HEAD")

    def merge(self, rev: str, message: str = "Merge.") -> str:
        self.git("merge", "--no-ff", "--no-edit", "-q", "-m", message, rev)
        return self.git("rev-parse", "HEAD")

    def branch(self, name: str, rev: str = "HEAD") -> None:
        self.git("branch", name, rev)

    def checkout(self, rev: str) -> None:
        self.git("checkout", "-q", rev)

    def detach(self, rev: str) -> None:
        self.git("checkout", "-q", "--detach", rev)

    def add_remote(self, name: str = "origin") -> None:
        self.git("remote", "add", name, "https://example.com/repo.git")

    def set_upstream(self, branch: str, remote: str = "origin") -> None:
        self.git("config", f"branch.{branch}.remote", remote)
        self.git("config", f"branch.{branch}.merge", f"refs/heads/{branch}")

    def branches(self) -> list[str]:
        output = self.git("for-each-ref", "--format=%(refname:short)", "refs/heads")
        return [line for line in output.splitlines() if line]

    def head_ref(self) -> str:
        return self.git("symbolic-ref", "HEAD")


@pytest.fixture
def git_repo(temp_dir):
    """An initialized git repository with no commits, HEAD on main."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")
    return GitRepoBuilder(temp_dir)
