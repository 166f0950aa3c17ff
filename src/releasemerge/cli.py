"""releasemerge CLI - action entry point and operator commands."""

import json
from pathlib import Path

import typer
from rich.markup import escape

from releasemerge import __version__, ui
from releasemerge.config import (
    Config,
    input_env_var,
    load_config_file,
    resolve_config,
)
from releasemerge.git.repo import GitRepo
from releasemerge.github.client import GitHubClient
from releasemerge.github.event import load_event
from releasemerge.orchestrator import describe, run as run_event
from releasemerge.pr.eligibility import is_eligible
from releasemerge.pr.validate import check_file_count, validate_files

cli = typer.Typer(
    name="releasemerge",
    help="Open and auto-merge release version bump pull requests",
    no_args_is_help=True,
)
console = ui.console


def _version_option_callback(value: bool) -> None:
    """Handle eager --version option."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show releasemerge version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging (also enabled by RUNNER_DEBUG=1).",
    ),
) -> None:
    """Configure logging for every command."""
    _ = version
    ui.configure_logging(verbose)


def _input_option(name: str, help_text: str):
    return typer.Option(None, f"--{name}", envvar=input_env_var(name), help=help_text, show_envvar=True)


def _fail(exc: BaseException) -> typer.Exit:
    ui.error(str(exc))
    return typer.Exit(1)


def _resolve(config_file: Path | None, overrides: dict[str, str | None]) -> Config:
    """Layer explicit values over config file values, then resolve defaults."""
    inputs: dict[str, str | None] = load_config_file(config_file) if config_file else {}
    for name, value in overrides.items():
        if value:
            inputs[name] = value
    return resolve_config(inputs)


def _require_token(token: str | None) -> str:
    if not token:
        raise typer.BadParameter(
            f"GitHub token is required (--github-token or {input_env_var('github-token')})",
            param_hint="--github-token",
        )
    return token


@cli.command(name="run")
def run_command(
    github_token: str | None = _input_option("github-token", "Token used for API calls and pushes"),
    package_manager: str | None = _input_option("package-manager", "Package manager: npm or yarn [default: npm]"),
    npm_lockfile_version: str | None = _input_option(
        "npm-lockfile-version", "npm lockfile version: 1 or 2 [default: 1]"
    ),
    additional_changes: str | None = _input_option(
        "additional-changes", 'JSON object of extra file -> ["expected strings"] or "*"'
    ),
    pr_author: str | None = _input_option("pr-author", "Author login of release PRs [default: guardian-ci]"),
    pr_prefix: str | None = _input_option("pr-prefix", "Title prefix of release PRs [default: chore(release):]"),
    release_branch: str | None = _input_option("release-branch", "Branch releases land on [default: main]"),
    branch_prefix: str | None = _input_option("branch-prefix", "Prefix for version bump branches [default: release-]"),
    commit_user: str | None = _input_option("commit-user", "Commit author name [default: guardian-ci]"),
    commit_email: str | None = _input_option("commit-email", "Commit author email"),
    require_patch: str | None = _input_option(
        "require-patch", "Fail when the API omits a file's diff [default: false]"
    ),
    config_file: Path | None = typer.Option(
        None,
        "--config-file",
        help="YAML file of input values (explicit options and INPUT_* variables win)",
    ),
    event_name: str = typer.Option(
        "",
        "--event-name",
        envvar="GITHUB_EVENT_NAME",
        help="Triggering event name",
    ),
    event_path: Path | None = typer.Option(
        None,
        "--event-path",
        envvar="GITHUB_EVENT_PATH",
        help="Path to the webhook event payload JSON",
    ),
    repo_root: Path = typer.Option(
        Path("."),
        "--repo-root",
        envvar="GITHUB_WORKSPACE",
        help="Repository working tree",
    ),
) -> None:
    """Handle one push or pull_request event."""
    try:
        token = _require_token(github_token)
        config = _resolve(
            config_file,
            {
                "package-manager": package_manager,
                "npm-lockfile-version": npm_lockfile_version,
                "additional-changes": additional_changes,
                "pr-author": pr_author,
                "pr-prefix": pr_prefix,
                "release-branch": release_branch,
                "branch-prefix": branch_prefix,
                "commit-user": commit_user,
                "commit-email": commit_email,
                "require-patch": require_patch,
            },
        )
        event = load_event(event_name, event_path)
        ui.info(f"Event name: {event.name}")
        outcome = run_event(
            event,
            config,
            github=GitHubClient(token),
            git=GitRepo(repo_root),
            token=token,
        )
    except typer.BadParameter:
        raise
    except Exception as exc:
        raise _fail(exc) from exc

    console.print(f"[green]✓[/green] {describe(outcome)}")


@cli.command(name="check-config")
def check_config(
    package_manager: str | None = _input_option("package-manager", "Package manager: npm or yarn"),
    npm_lockfile_version: str | None = _input_option("npm-lockfile-version", "npm lockfile version: 1 or 2"),
    additional_changes: str | None = _input_option("additional-changes", "Extra expected changes JSON"),
    pr_author: str | None = _input_option("pr-author", "Author login of release PRs"),
    pr_prefix: str | None = _input_option("pr-prefix", "Title prefix of release PRs"),
    release_branch: str | None = _input_option("release-branch", "Branch releases land on"),
    require_patch: str | None = _input_option("require-patch", "Fail when the API omits a file's diff"),
    config_file: Path | None = typer.Option(None, "--config-file", help="YAML file of input values"),
) -> None:
    """Resolve configuration and print the expected change map."""
    try:
        config = _resolve(
            config_file,
            {
                "package-manager": package_manager,
                "npm-lockfile-version": npm_lockfile_version,
                "additional-changes": additional_changes,
                "pr-author": pr_author,
                "pr-prefix": pr_prefix,
                "release-branch": release_branch,
                "require-patch": require_patch,
            },
        )
    except Exception as exc:
        raise _fail(exc) from exc

    console.print(f"[cyan]Package manager:[/cyan] {config.package_manager}")
    console.print(f"[cyan]Release branch:[/cyan] {escape(config.release_branch)}")
    console.print(f"[cyan]PR author:[/cyan] {escape(config.pull_request_author)}")
    console.print(f"[cyan]PR prefix:[/cyan] {escape(config.pull_request_prefix)}")
    console.print(f"[cyan]Require patch:[/cyan] {config.require_patch}")
    console.print("[cyan]Expected changes:[/cyan]")
    console.print_json(json.dumps(config.describe_expected_changes()))


@cli.command(name="validate")
def validate_command(
    repository: str = typer.Option(..., "--repository", envvar="GITHUB_REPOSITORY", help="owner/repo"),
    number: int = typer.Option(..., "--pr", help="Pull request number"),
    github_token: str | None = _input_option("github-token", "Token used for API calls"),
    package_manager: str | None = _input_option("package-manager", "Package manager: npm or yarn"),
    npm_lockfile_version: str | None = _input_option("npm-lockfile-version", "npm lockfile version: 1 or 2"),
    additional_changes: str | None = _input_option("additional-changes", "Extra expected changes JSON"),
    pr_author: str | None = _input_option("pr-author", "Author login of release PRs"),
    pr_prefix: str | None = _input_option("pr-prefix", "Title prefix of release PRs"),
    require_patch: str | None = _input_option("require-patch", "Fail when the API omits a file's diff"),
    config_file: Path | None = typer.Option(None, "--config-file", help="YAML file of input values"),
) -> None:
    """Dry run: check a pull request without approving or merging it."""
    owner, _, repo = repository.partition("/")
    if not owner or not repo or "/" in repo:
        raise typer.BadParameter("must be in owner/repo form", param_hint="--repository")

    try:
        token = _require_token(github_token)
        config = _resolve(
            config_file,
            {
                "package-manager": package_manager,
                "npm-lockfile-version": npm_lockfile_version,
                "additional-changes": additional_changes,
                "pr-author": pr_author,
                "pr-prefix": pr_prefix,
                "require-patch": require_patch,
            },
        )
        github = GitHubClient(token)
        pull_request = github.get_pull_request(owner, repo, number)
        if not is_eligible(pull_request, config):
            console.print("[yellow]Not a release pull request; it would be ignored.[/yellow]")
            return
        verdict = check_file_count(pull_request, config)
        if verdict.passed:
            verdict = validate_files(github.list_files(owner, repo, number), config)
    except typer.BadParameter:
        raise
    except Exception as exc:
        raise _fail(exc) from exc

    if not verdict.passed:
        ui.error(verdict.reason or "Pull request failed validation")
        raise typer.Exit(1)
    console.print("[green]✓ Pull request matches the expected changes[/green]")


if __name__ == "__main__":
    cli()
