"""Value objects read from the repository.

Contains:
- Commit: A commit's identity, parents and summary
- Branch: A local branch name and the commit it targets

Both are immutable copies of repository state, so they stay valid after the
repository is mutated (branch creation, HEAD moves).
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Commit:
    """A commit in the local repository.

    Attributes:
        id: Full commit hash.
        parent_ids: Hashes of the parent commits, in order.
        summary: First line of the commit message, None if the message is empty.
    """

    id: str
    parent_ids: tuple[str, ...] = ()
    summary: Optional[str] = None

    @property
    def short_id(self) -> str:
        return self.id[:7]

    @property
    def is_root(self) -> bool:
        return not self.parent_ids

    @property
    def is_merge(self) -> bool:
        return len(self.parent_ids) > 1


@dataclass(frozen=True)
class Branch:
    """A local branch.

    Attributes:
        name: Short branch name (e.g. "main").
        target: Hash of the commit the branch points at.
    """

    name: str
    target: str
