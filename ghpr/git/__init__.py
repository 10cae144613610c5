"""Local git repository access for ghpr.

This package provides:
- exceptions: GitError, GitCondition, classify_stderr
- runner: _run_git_command, get_repo_root
- models: Commit, Branch
- repository: GitRepository
"""

# Exceptions
from ghpr.git.exceptions import (
    GitCondition,
    GitError,
    classify_stderr,
)

# Runner utilities
from ghpr.git.runner import (
    _run_git_command,
    get_repo_root,
)

# Value objects
from ghpr.git.models import (
    Branch,
    Commit,
)

# Repository provider
from ghpr.git.repository import GitRepository


__all__ = [
    # Exceptions
    "GitCondition",
    "GitError",
    "classify_stderr",
    # Runner
    "_run_git_command",
    "get_repo_root",
    # Models
    "Branch",
    "Commit",
    # Repository
    "GitRepository",
]
