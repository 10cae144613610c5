"""Git-related exception classes.

Contains:
- GitCondition: Classified failure conditions reported by git
- GitError: Raised when a git command fails
- classify_stderr: Map git's stderr to a GitCondition
"""

import re
from enum import Enum
from typing import Optional


class GitCondition(Enum):
    """Failure conditions git can report that callers care about."""

    NOT_A_REPOSITORY = "not_a_repository"
    UNBORN_BRANCH = "unborn_branch"
    GIT_MISSING = "git_missing"
    UNKNOWN = "unknown"


# Checked in order, first match wins.
STDERR_CONDITIONS: list[tuple[re.Pattern, GitCondition]] = [
    (re.compile(r"not a git repository", re.IGNORECASE), GitCondition.NOT_A_REPOSITORY),
    (re.compile(r"does not have any commits yet", re.IGNORECASE), GitCondition.UNBORN_BRANCH),
]


def classify_stderr(stderr: str) -> GitCondition:
    """Classify a git error message.

    Args:
        stderr: The stderr output of the failed git command.

    Returns:
        The first matching condition, or GitCondition.UNKNOWN.
    """
    for pattern, condition in STDERR_CONDITIONS:
        if pattern.search(stderr):
            return condition
    return GitCondition.UNKNOWN


class GitError(Exception):
    """Raised when a git command fails."""

    def __init__(
        self,
        message: str,
        stderr: str = "",
        returncode: Optional[int] = None,
        condition: Optional[GitCondition] = None,
    ):
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode
        self.condition = condition if condition is not None else classify_stderr(stderr)
