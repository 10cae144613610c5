"""Failures of the pull request branch workflow.

Every failure is terminal and carries a one-line, user-facing message:
- GhprError: Base class for all workflow failures
- NoRepositoryError, NoSelectedCommitError, NoRemoteError, NoRemoteBranchError
- UnknownMainBranchError, NoBaseBranchError, MultipleParentCommitsError
- NoCommitMessageError, MissingBranchParameterError, BranchTemplateMalformedError
- UnableToCreateBranchError, UnableToSelectBranchError
- BadParameterError: Invalid configuration
- GenericError: Unclassified lower-layer failure
"""

from typing import Optional

from ghpr.git.exceptions import GitCondition, GitError


class GhprError(Exception):
    """Base exception for workflow failures."""

    pass


class NoRepositoryError(GhprError):
    def __init__(self):
        super().__init__("Could not find a repository. Has `git init` been run?")


class NoSelectedCommitError(GhprError):
    def __init__(self):
        super().__init__(
            "No currently selected commit. Are there any commits on this repository?"
        )


class NoRemoteError(GhprError):
    def __init__(self):
        super().__init__("This repository has no remote.")


class NoRemoteBranchError(GhprError):
    """Raised when a branch has no upstream configured."""

    def __init__(self, branch_name: str):
        self.branch_name = branch_name
        super().__init__(f"The branch {branch_name} does not have a remote.")


class UnknownMainBranchError(GhprError):
    def __init__(self):
        super().__init__("Could not find a 'main' branch. Tried 'main' and 'master'.")


class NoBaseBranchError(GhprError):
    """Raised when the ancestry walk reaches a root commit."""

    def __init__(self):
        super().__init__("Could not find a base branch for the current commit.")


class MultipleParentCommitsError(GhprError):
    """Raised when the ancestry walk reaches a merge commit."""

    def __init__(self, commit_id: str):
        self.commit_id = commit_id
        super().__init__(
            f"Commit {commit_id} has multiple parents. Merge commits are not supported."
        )


class NoCommitMessageError(GhprError):
    def __init__(self):
        super().__init__("No commit message available for generating the branch name.")


class MissingBranchParameterError(GhprError):
    """Raised when the branch name template uses a parameter that was not given."""

    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"Missing parameter {parameter}")


class BranchTemplateMalformedError(GhprError):
    """Raised when the branch name template cannot be parsed or rendered."""

    def __init__(self, message: str):
        super().__init__(message)


class UnableToCreateBranchError(GhprError):
    def __init__(self, branch_name: str, base_commit: str):
        self.branch_name = branch_name
        self.base_commit = base_commit
        super().__init__(f"Could not create branch '{branch_name}' on commit {base_commit}.")


class UnableToSelectBranchError(GhprError):
    """Raised when the branch exists but HEAD could not be moved to it."""

    def __init__(self, branch_name: str):
        self.branch_name = branch_name
        super().__init__(f"Could not switch to branch '{branch_name}'.")


class BadParameterError(GhprError):
    """Raised when configuration is missing or invalid."""

    def __init__(self, message: str):
        super().__init__(message)


class GenericError(GhprError):
    """Raised for lower-layer failures with no specific meaning to the workflow."""

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        super().__init__(f"Generic: {detail}" if detail else "Generic")


# Git conditions with a specific meaning to the workflow.
# Anything not listed becomes a GenericError.
GIT_CONDITION_ERRORS: dict[GitCondition, type[GhprError]] = {
    GitCondition.NOT_A_REPOSITORY: NoRepositoryError,
    GitCondition.UNBORN_BRANCH: NoSelectedCommitError,
}


def from_git_error(error: GitError) -> GhprError:
    """Translate a git failure into a workflow failure.

    Args:
        error: The failed git command.

    Returns:
        The matching failure from GIT_CONDITION_ERRORS, or GenericError.
    """
    error_class = GIT_CONDITION_ERRORS.get(error.condition)
    if error_class is None:
        return GenericError(str(error).splitlines()[0] if str(error) else None)
    return error_class()
