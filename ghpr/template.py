"""Branch name template rendering.

Templates use Jinja2 syntax (e.g. "{{jira}}-{{summary}}"). Rendering failures
are reported as one of two structured errors:
- UndefinedVariableError: The template references a variable that was not given
- MalformedTemplateError: Any other parse or render failure
"""

from jinja2 import Environment, StrictUndefined, nodes
from jinja2 import TemplateError as JinjaTemplateError

# Provided by Jinja inside {% for %} blocks
BUILTIN_NAMES = frozenset({"loop"})


class TemplateError(Exception):
    """Base exception for template rendering errors."""

    pass


class UndefinedVariableError(TemplateError):
    """Raised when a template references a variable that was not supplied."""

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"'{variable}' is undefined")


class MalformedTemplateError(TemplateError):
    """Raised when a template cannot be parsed or rendered."""

    pass


class TemplateRenderer:
    """Renders templates against a set of named string variables."""

    def __init__(self):
        self.env = Environment(
            undefined=StrictUndefined,  # Raise error on undefined variables
            autoescape=False,
            keep_trailing_newline=False,
        )

    def render(self, template: str, variables: dict[str, str]) -> str:
        """Render a template.

        Args:
            template: Template source.
            variables: Values for the template's variables.

        Returns:
            The rendered string.

        Raises:
            UndefinedVariableError: If a referenced variable is not in variables.
            MalformedTemplateError: On syntax errors or any other render failure.
        """
        try:
            ast = self.env.parse(template)
        except JinjaTemplateError as e:
            raise MalformedTemplateError(str(e)) from e

        missing = self._first_missing_variable(ast, variables)
        if missing is not None:
            raise UndefinedVariableError(missing)

        try:
            return self.env.from_string(ast).render(**variables)
        except (JinjaTemplateError, TypeError, ValueError) as e:
            raise MalformedTemplateError(str(e)) from e

    def _first_missing_variable(self, ast: nodes.Template, variables: dict[str, str]) -> str | None:
        """Find the first variable read before anything defines it.

        Names assigned inside the template ({% set %}, loop targets, macro
        arguments) count from their assignment on, and `loop` is always
        available. The right-hand side of a {% set %} is visited after its
        target, so `{% set p = p %}` is left to fail at render time.
        """
        assigned = set()
        for node in ast.find_all(nodes.Name):
            if node.ctx in ("store", "param"):
                assigned.add(node.name)
                continue
            if node.ctx != "load":
                continue
            if node.name in variables or node.name in assigned:
                continue
            if node.name in self.env.globals or node.name in BUILTIN_NAMES:
                continue
            return node.name
        return None
