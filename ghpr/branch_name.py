"""Branch name synthesis from a commit summary and a name template.

Contains:
- slugify: Turn a commit summary into a ref-safe slug
- synthesize_branch_name: Render the branch name template for a commit
"""

import re
from typing import Optional

from ghpr.errors import (
    BranchTemplateMalformedError,
    MissingBranchParameterError,
    NoCommitMessageError,
)
from ghpr.git.models import Commit
from ghpr.template import MalformedTemplateError, TemplateRenderer, UndefinedVariableError

MAX_SLUG_LENGTH = 40
DEFAULT_BRANCH_NAME_TEMPLATE = "{{summary}}"

_DISALLOWED_CHARS = re.compile(r"[^a-z0-9\- \t\n\r\f\v]")
_WHITESPACE = re.compile(r"\s+")


def slugify(summary: str) -> str:
    """Turn a commit summary into a branch-name-safe slug.

    Lowercases, drops everything but ASCII letters, digits, hyphens and
    whitespace, joins words with single hyphens and truncates to
    MAX_SLUG_LENGTH characters. Non-ASCII characters are dropped, not
    transliterated.

    Args:
        summary: First line of a commit message.

    Returns:
        The slug, e.g. "fix-login-bug" for "Fix login bug".
    """
    slug = _DISALLOWED_CHARS.sub("", summary.lower()).strip()
    slug = _WHITESPACE.sub("-", slug)
    # Refs may not start with a hyphen
    return slug[:MAX_SLUG_LENGTH].strip("-")


def synthesize_branch_name(
    commit: Commit,
    template: str = DEFAULT_BRANCH_NAME_TEMPLATE,
    parameters: Optional[dict[str, str]] = None,
    renderer: Optional[TemplateRenderer] = None,
) -> str:
    """Render the branch name for a commit.

    The template sees `summary` (the slugified commit summary) plus every
    entry in parameters. A parameter named `summary` replaces the slug.

    Args:
        commit: The commit the branch is for.
        template: Branch name template.
        parameters: Extra template variables.
        renderer: Template renderer (a default TemplateRenderer if omitted).

    Returns:
        The rendered branch name.

    Raises:
        NoCommitMessageError: If the commit has no summary.
        MissingBranchParameterError: If the template uses an unknown variable.
        BranchTemplateMalformedError: If the template cannot be rendered.
    """
    if not commit.summary:
        raise NoCommitMessageError()

    variables = {"summary": slugify(commit.summary)}
    variables.update(parameters or {})

    renderer = renderer or TemplateRenderer()
    try:
        return renderer.render(template, variables)
    except UndefinedVariableError as e:
        raise MissingBranchParameterError(e.variable) from e
    except MalformedTemplateError as e:
        raise BranchTemplateMalformedError(str(e)) from e
