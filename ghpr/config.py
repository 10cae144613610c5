"""Configuration loading and merging for ghpr.

Sources, highest precedence first:
- command line options (--verbose and the command only come from here)
- environment variables prefixed with GH_PR_ (a .env file is loaded first)
- ~/.ghpr.yaml
- $XDG_CONFIG_HOME/ghpr/config.yaml

Config files are YAML mappings:

    branch_name_template: "{{jira}}-{{summary}}"
    branch_name_parameters:
      jira: PROJ-123
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError

from ghpr.branch_name import DEFAULT_BRANCH_NAME_TEMPLATE
from ghpr.errors import BadParameterError

CONFIG_FILE = "config.yaml"
HOME_CONFIG_FILE = ".ghpr.yaml"
ENV_PREFIX = "GH_PR_"

# Only plain string options can come from the environment
ENV_OPTIONS = ("branch_name_template",)


class FileOptions(BaseModel):
    """Options that may come from config files or the environment."""

    model_config = ConfigDict(extra="forbid")

    branch_name_template: Optional[str] = None
    branch_name_parameters: dict[str, str] = {}


@dataclass
class CmdOptions:
    """Options given on the command line."""

    verbose: int = 0
    branch_name_template: Optional[str] = None
    jira: Optional[str] = None
    params: list[str] = field(default_factory=list)


@dataclass
class CreateCommand:
    """The `create` command and its resolved branch name parameters."""

    branch_name_parameters: dict[str, str] = field(default_factory=dict)


@dataclass
class Configuration:
    """Fully resolved configuration for one run."""

    branch_name_template: str
    verbose: int
    command: CreateCommand


def get_xdg_config_file() -> Path:
    """Get path to $XDG_CONFIG_HOME/ghpr/config.yaml (~/.config if unset)."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / "ghpr" / CONFIG_FILE


def get_home_config_file() -> Path:
    """Get path to ~/.ghpr.yaml."""
    return Path.home() / HOME_CONFIG_FILE


def load_yaml_file(path: Path) -> dict:
    """Load one config file.

    Returns:
        The file's mapping. Empty dict if the file doesn't exist.

    Raises:
        BadParameterError: If the file is unreadable or not a YAML mapping.
    """
    if not path.exists():
        return {}

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise BadParameterError(f"Failed to load config from {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadParameterError(f"Config file {path} must contain a mapping.")
    return data


def env_options(environ: Mapping[str, str]) -> dict:
    """Collect GH_PR_* variables as option values."""
    options = {}
    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX):].lower()
        if name in ENV_OPTIONS:
            options[name] = value
    return options


def _merge_options(base: dict, override: dict) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = {**merged[key], **value}
        else:
            merged[key] = value
    return merged


def _format_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "config"
        problems.append(f"{location}: {item['msg']}")
    return "Invalid configuration: " + "; ".join(problems)


def load_file_options(
    environ: Optional[Mapping[str, str]] = None,
    paths: Optional[list[Path]] = None,
) -> FileOptions:
    """Load and merge options from config files and the environment.

    Args:
        environ: Environment to read. Defaults to os.environ after loading .env.
        paths: Config files, lowest precedence first. Defaults to the XDG file
            then the home dot file.

    Raises:
        BadParameterError: If a file is malformed or has unknown or mistyped keys.
    """
    if environ is None:
        dotenv_path = find_dotenv(usecwd=True)
        if dotenv_path:
            load_dotenv(dotenv_path, override=False)
        environ = os.environ
    if paths is None:
        paths = [get_xdg_config_file(), get_home_config_file()]

    merged: dict = {}
    for path in paths:
        merged = _merge_options(merged, load_yaml_file(path))
    merged = _merge_options(merged, env_options(environ))

    try:
        return FileOptions.model_validate(merged)
    except ValidationError as e:
        raise BadParameterError(_format_validation_error(e))


def parse_parameters(values: list[str]) -> dict[str, str]:
    """Parse KEY=VALUE command line parameters.

    Raises:
        BadParameterError: If a value has no '=' or an empty key.
    """
    parameters = {}
    for value in values:
        key, sep, param = value.partition("=")
        key = key.strip()
        if not sep or not key:
            raise BadParameterError(f"Invalid parameter '{value}', expected KEY=VALUE.")
        parameters[key] = param
    return parameters


def first_of(*values: Optional[str], name: str) -> str:
    """Return the first value that is set.

    Raises:
        BadParameterError: If none is set.
    """
    for value in values:
        if value is not None:
            return value
    raise BadParameterError(name)


def merge(file_options: FileOptions, cmd_options: CmdOptions) -> Configuration:
    """Combine file/environment options with command line options."""
    parameters = dict(file_options.branch_name_parameters)
    parameters.update(parse_parameters(cmd_options.params))
    if cmd_options.jira is not None:
        parameters["jira"] = cmd_options.jira

    return Configuration(
        branch_name_template=first_of(
            cmd_options.branch_name_template,
            file_options.branch_name_template,
            DEFAULT_BRANCH_NAME_TEMPLATE,
            name="branch_name_template",
        ),
        verbose=cmd_options.verbose,
        command=CreateCommand(branch_name_parameters=parameters),
    )


def load(
    cmd_options: CmdOptions,
    environ: Optional[Mapping[str, str]] = None,
    paths: Optional[list[Path]] = None,
) -> Configuration:
    """Load the configuration for one run."""
    return merge(load_file_options(environ, paths), cmd_options)
