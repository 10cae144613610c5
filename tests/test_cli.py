"""Tests for ghpr.cli module."""

from typer.testing import CliRunner

from ghpr.cli import app
from ghpr.config import Configuration, CreateCommand
from ghpr.create import PullRequestBranch
from ghpr.errors import BadParameterError, NoRemoteError, UnknownMainBranchError


runner = CliRunner()


def make_configuration(template="{{summary}}", verbose=0, parameters=None):
    return Configuration(
        branch_name_template=template,
        verbose=verbose,
        command=CreateCommand(branch_name_parameters=parameters or {}),
    )


def make_result():
    return PullRequestBranch(branch_name="commit-2", base_branch="main", created=True)


class TestCreateCommand:
    """Tests for ghpr create."""

    def test_success_is_silent(self, mocker):
        """Test that success exits 0 without output."""
        mocker.patch("ghpr.cli.create.load_configuration", return_value=make_configuration())
        mock_create = mocker.patch("ghpr.cli.create.create_pull_request", return_value=make_result())

        result = runner.invoke(app, ["create"])

        assert result.exit_code == 0
        assert result.output == ""
        args = mock_create.call_args.args
        assert args[0] == "."
        assert args[1] == "{{summary}}"
        assert args[2] == {}

    def test_failure_message_and_exit_code(self, mocker):
        """Test that a workflow failure is printed and exits 1."""
        mocker.patch("ghpr.cli.create.load_configuration", return_value=make_configuration())
        mocker.patch("ghpr.cli.create.create_pull_request", side_effect=NoRemoteError())

        result = runner.invoke(app, ["create"])

        assert result.exit_code == 1
        assert result.output == "This repository has no remote.\n"

    def test_unknown_main_branch_message(self, mocker):
        mocker.patch("ghpr.cli.create.load_configuration", return_value=make_configuration())
        mocker.patch("ghpr.cli.create.create_pull_request", side_effect=UnknownMainBranchError())

        result = runner.invoke(app, ["create"])

        assert result.exit_code == 1
        assert "Tried 'main' and 'master'" in result.output

    def test_configuration_error(self, mocker):
        """Test that configuration errors are reported the same way."""
        mocker.patch(
            "ghpr.cli.create.load_configuration",
            side_effect=BadParameterError("Invalid parameter 'x', expected KEY=VALUE."),
        )
        mock_create = mocker.patch("ghpr.cli.create.create_pull_request")

        result = runner.invoke(app, ["create", "--param", "x"])

        assert result.exit_code == 1
        assert "expected KEY=VALUE" in result.output
        mock_create.assert_not_called()

    def test_options_reach_configuration(self, mocker):
        """Test that global and command options are passed to config loading."""
        mock_load = mocker.patch(
            "ghpr.cli.create.load_configuration", return_value=make_configuration()
        )
        mocker.patch("ghpr.cli.create.create_pull_request", return_value=make_result())

        result = runner.invoke(
            app,
            ["-vv", "-b", "{{jira}}-{{summary}}", "create", "--jira", "PROJ-1", "-p", "team=core"],
        )

        assert result.exit_code == 0
        cmd_options = mock_load.call_args.args[0]
        assert cmd_options.verbose == 2
        assert cmd_options.branch_name_template == "{{jira}}-{{summary}}"
        assert cmd_options.jira == "PROJ-1"
        assert cmd_options.params == ["team=core"]

    def test_verbose_reports_branch(self, mocker):
        """Test that -vvv logs progress to stderr."""
        mocker.patch(
            "ghpr.cli.create.load_configuration", return_value=make_configuration(verbose=3)
        )
        mocker.patch("ghpr.cli.create.create_pull_request", return_value=make_result())

        result = runner.invoke(app, ["-vvv", "create"])

        assert result.exit_code == 0
        assert "commit-2" in result.output


class TestMainCommand:
    """Tests for global options."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert result.output.startswith("ghpr ")

    def test_help_lists_create(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "create" in result.output


class TestEndToEnd:
    """Runs ghpr create inside real repositories."""

    def isolate(self, monkeypatch, directory):
        monkeypatch.chdir(directory)
        monkeypatch.setenv("HOME", str(directory))
        monkeypatch.setenv("XDG_CONFIG_HOME", str(directory / ".config"))
        monkeypatch.delenv("GH_PR_BRANCH_NAME_TEMPLATE", raising=False)

    def test_no_branch(self, git_repo, monkeypatch):
        git_repo.commit("Initial commit.")
        git_repo.add_remote("origin")
        git_repo.set_upstream("main")
        git_repo.detach("main")
        git_repo.commit("Commit 2.")
        self.isolate(monkeypatch, git_repo.root)

        result = runner.invoke(app, ["create"])

        assert result.exit_code == 0
        assert result.output == ""
        assert git_repo.head_ref() == "refs/heads/commit-2"

    def test_initialized_no_commits(self, git_repo, monkeypatch):
        self.isolate(monkeypatch, git_repo.root)

        result = runner.invoke(app, ["create"])

        assert result.exit_code == 1
        assert result.output == "This repository has no remote.\n"

    def test_not_a_repository(self, temp_dir, monkeypatch):
        self.isolate(monkeypatch, temp_dir)

        result = runner.invoke(app, ["create"])

        assert result.exit_code == 1
        assert result.output.startswith("Could not find a repository.")

    def test_template_from_config_file(self, git_repo, monkeypatch):
        git_repo.commit("Initial commit.")
        git_repo.add_remote("origin")
        git_repo.set_upstream("main")
        git_repo.detach("main")
        git_repo.commit("Fix login bug")
        self.isolate(monkeypatch, git_repo.root)
        (git_repo.root / ".ghpr.yaml").write_text('branch_name_template: "{{jira}}/{{summary}}"\n')

        result = runner.invoke(app, ["create", "--jira", "PROJ-3"])

        assert result.exit_code == 0, result.output
        assert git_repo.head_ref() == "refs/heads/PROJ-3/fix-login-bug"
