"""The `create` workflow: find or create the branch for the current commit.

Steps, each of which can end the run with a GhprError:
1. Discover the repository and check it has a remote
2. Resolve the commit HEAD points at
3. Walk the ancestry to find the base branch, and check it has an upstream
4. Find the branch for the commit, or create one from the name template
5. Point HEAD at that branch

Nothing is rolled back: a branch created in step 4 stays if step 5 fails.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

from ghpr.branch_name import DEFAULT_BRANCH_NAME_TEMPLATE, synthesize_branch_name
from ghpr.errors import (
    MultipleParentCommitsError,
    NoBaseBranchError,
    NoRemoteBranchError,
    NoRemoteError,
    UnableToCreateBranchError,
    UnableToSelectBranchError,
    UnknownMainBranchError,
    from_git_error,
)
from ghpr.git import Branch, Commit, GitError, GitRepository
from ghpr.template import TemplateRenderer

# Checked in this order
MAINLINE_BRANCH_NAMES = ("main", "master")

_default_log = logging.getLogger("ghpr")


@dataclass(frozen=True)
class PullRequestBranch:
    """Outcome of a successful run.

    Attributes:
        branch_name: Branch HEAD now points at.
        base_branch: Branch the pull request should target.
        created: Whether the branch was created by this run.
        upstream: The branch's configured upstream, None if not pushed yet.
        pull_request_url: Always None; pull requests are not opened yet.
    """

    branch_name: str
    base_branch: str
    created: bool
    upstream: Optional[str] = None
    pull_request_url: Optional[str] = None


@contextmanager
def git_errors() -> Iterator[None]:
    """Translate GitError raised inside the block into a GhprError."""
    try:
        yield
    except GitError as e:
        raise from_git_error(e) from e


def get_selected_commit(repo: GitRepository, log: logging.Logger = _default_log) -> Commit:
    """Get the commit HEAD points at.

    Raises:
        NoSelectedCommitError: If the repository has no commits yet.
    """
    with git_errors():
        commit = repo.head_commit()
    log.info("Selected commit %s: %s", commit.short_id, commit.summary or "")
    return commit


def check_has_remote(repo: GitRepository, log: logging.Logger = _default_log) -> None:
    """Raise NoRemoteError if the repository has no remotes."""
    with git_errors():
        remotes = repo.remotes()
    if not remotes:
        raise NoRemoteError()
    log.debug("Remotes: %s", ", ".join(remotes))


def get_branch_upstream(
    repo: GitRepository, branch_name: str, log: logging.Logger = _default_log
) -> Optional[str]:
    """Get a branch's upstream, None if it has not been configured."""
    with git_errors():
        upstream = repo.branch_upstream(branch_name)
    if upstream is None:
        log.info("Branch %s has no upstream yet.", branch_name)
    else:
        log.debug("Branch %s tracks %s.", branch_name, upstream)
    return upstream


def check_branch_has_upstream(
    repo: GitRepository, branch_name: str, log: logging.Logger = _default_log
) -> str:
    """Get a branch's upstream.

    Raises:
        NoRemoteBranchError: If the branch has no upstream configured.
    """
    upstream = get_branch_upstream(repo, branch_name, log)
    if upstream is None:
        raise NoRemoteBranchError(branch_name)
    return upstream


def find_main_branch(branches: list[Branch]) -> Branch:
    """Pick the mainline branch, trying MAINLINE_BRANCH_NAMES in order.

    Raises:
        UnknownMainBranchError: If none of the names exist.
    """
    by_name = {branch.name: branch for branch in branches}
    for name in MAINLINE_BRANCH_NAMES:
        if name in by_name:
            return by_name[name]
    raise UnknownMainBranchError()


def find_base_branch(
    repo: GitRepository, commit: Commit, log: logging.Logger = _default_log
) -> Branch:
    """Find the branch a pull request for commit should target.

    Walks first parents from commit until it reaches the merge base with the
    mainline (the base is the mainline) or a parent that another local branch
    points at (the base is that branch). Branches are tried in ref name order.

    Raises:
        UnknownMainBranchError: If there is no main or master branch.
        NoBaseBranchError: If the walk reaches a root commit.
        MultipleParentCommitsError: If the walk reaches a merge commit.
    """
    with git_errors():
        branches = repo.local_branches()
        main_branch = find_main_branch(branches)
        merge_base = repo.merge_base(main_branch.target, commit.id)
    log.debug("Mainline %s, merge base %s", main_branch.name, merge_base)

    candidates = [branch for branch in branches if branch.name != main_branch.name]

    current = commit
    while True:
        if current.id == merge_base:
            log.info("Base branch is %s.", main_branch.name)
            return main_branch
        if current.is_root:
            raise NoBaseBranchError()
        if current.is_merge:
            raise MultipleParentCommitsError(current.id)

        parent_id = current.parent_ids[0]
        for branch in candidates:
            if branch.target == parent_id:
                log.info("Base branch is %s.", branch.name)
                return branch

        with git_errors():
            current = repo.find_commit(parent_id)


def find_branch_for_commit(
    branches: list[Branch], commit: Commit, current_branch: Optional[str] = None
) -> Optional[Branch]:
    """Find a local branch pointing at commit.

    The checked-out branch wins if it matches, otherwise the first match in
    ref name order.
    """
    matches = [branch for branch in branches if branch.target == commit.id]
    for branch in matches:
        if branch.name == current_branch:
            return branch
    return matches[0] if matches else None


def select_branch(repo: GitRepository, branch_name: str, log: logging.Logger = _default_log) -> None:
    """Point HEAD at a branch.

    Raises:
        UnableToSelectBranchError: If HEAD could not be moved.
    """
    try:
        repo.set_head(branch_name)
    except GitError as e:
        raise UnableToSelectBranchError(branch_name) from e
    log.info("Switched to branch %s.", branch_name)


def find_or_create_branch(
    repo: GitRepository,
    commit: Commit,
    branch_name_template: str = DEFAULT_BRANCH_NAME_TEMPLATE,
    branch_name_parameters: Optional[dict[str, str]] = None,
    log: logging.Logger = _default_log,
    renderer: Optional[TemplateRenderer] = None,
) -> tuple[Branch, bool]:
    """Make sure a branch points at commit and HEAD is on it.

    Returns:
        The branch, and whether it was created.

    Raises:
        NoCommitMessageError, MissingBranchParameterError,
        BranchTemplateMalformedError: If a new name cannot be synthesized.
        UnableToCreateBranchError: If the branch cannot be created.
        UnableToSelectBranchError: If HEAD cannot be moved to the branch.
    """
    with git_errors():
        branches = repo.local_branches()
        current_branch = repo.current_branch()

    existing = find_branch_for_commit(branches, commit, current_branch)
    if existing is not None:
        log.info("Commit %s already has branch %s.", commit.short_id, existing.name)
        if existing.name != current_branch:
            select_branch(repo, existing.name, log)
        return existing, False

    branch_name = synthesize_branch_name(
        commit,
        branch_name_template,
        branch_name_parameters,
        renderer=renderer,
    )
    log.info("Creating branch %s on %s.", branch_name, commit.short_id)
    try:
        branch = repo.create_branch(branch_name, commit.id)
    except GitError as e:
        raise UnableToCreateBranchError(branch_name, commit.id) from e

    select_branch(repo, branch.name, log)
    return branch, True


def create_pull_request(
    path: Union[str, Path] = ".",
    branch_name_template: str = DEFAULT_BRANCH_NAME_TEMPLATE,
    branch_name_parameters: Optional[dict[str, str]] = None,
    log: logging.Logger = _default_log,
    repo: Optional[GitRepository] = None,
    renderer: Optional[TemplateRenderer] = None,
) -> PullRequestBranch:
    """Run the whole workflow for the repository containing path.

    Args:
        path: Any path inside the repository's working tree.
        branch_name_template: Template for new branch names.
        branch_name_parameters: Extra variables for the template.
        log: Diagnostic output.
        repo: Repository to use instead of discovering one from path.
        renderer: Template renderer for branch names.

    Returns:
        The branch HEAD now points at and the base branch for the pull request.

    Raises:
        GhprError: The first failure encountered.
    """
    if repo is None:
        log.info("Opening the local git repository.")
        with git_errors():
            repo = GitRepository.discover(path)

    check_has_remote(repo, log)
    commit = get_selected_commit(repo, log)
    base_branch = find_base_branch(repo, commit, log)
    check_branch_has_upstream(repo, base_branch.name, log)

    branch, created = find_or_create_branch(
        repo,
        commit,
        branch_name_template,
        branch_name_parameters,
        log=log,
        renderer=renderer,
    )
    upstream = get_branch_upstream(repo, branch.name, log)

    return PullRequestBranch(
        branch_name=branch.name,
        base_branch=base_branch.name,
        created=created,
        upstream=upstream,
    )
