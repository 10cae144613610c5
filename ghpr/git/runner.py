"""Git command runner and repository utilities.

Contains:
- _run_git_command: Run a git command and return its output
- get_repo_root: Get the root directory of the git repository containing a path
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Union

from ghpr.git.exceptions import GitCondition, GitError
from ghpr.verbose import TRACE

logger = logging.getLogger("ghpr.git.runner")


def _run_git_command(args: list[str], cwd: Optional[Union[str, Path]] = None) -> str:
    """Run a git command and return its output.

    Args:
        args: List of arguments to pass to git.
        cwd: Directory to run git in (defaults to the process working directory).

    Returns:
        The stdout of the git command.

    Raises:
        GitError: If the command fails.
    """
    logger.debug("git %s", " ".join(args))
    try:
        result = subprocess.run(
            ["git"] + args,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
        logger.log(TRACE, "%s", result.stdout.rstrip())
        return result.stdout.strip()
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise GitError(
            f"Git command failed: git {' '.join(args)}\n{stderr}",
            stderr=stderr,
            returncode=e.returncode,
        )
    except FileNotFoundError:
        raise GitError(
            "Git is not installed or not in PATH.",
            condition=GitCondition.GIT_MISSING,
        )


def get_repo_root(path: Union[str, Path] = ".") -> Path:
    """Get the root directory of the git repository containing a path.

    Args:
        path: Any path inside the working tree.

    Returns:
        Path to the repository root.

    Raises:
        GitError: If the path is not inside a git repository.
    """
    if not Path(path).is_dir():
        raise GitError(
            f"Not in a git repository: {path}",
            condition=GitCondition.NOT_A_REPOSITORY,
        )

    try:
        root = _run_git_command(["rev-parse", "--show-toplevel"], cwd=path)
    except GitError as e:
        if e.condition == GitCondition.GIT_MISSING:
            raise
        raise GitError(
            f"Not in a git repository: {path}",
            stderr=e.stderr,
            returncode=e.returncode,
            condition=GitCondition.NOT_A_REPOSITORY,
        )
    if not root:
        # Inside the .git directory of a repository
        raise GitError(
            f"Not in a git working tree: {path}",
            condition=GitCondition.NOT_A_REPOSITORY,
        )
    return Path(root)
