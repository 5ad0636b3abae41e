"""CLI entry point for goship."""

from __future__ import annotations

import logging
from pathlib import Path

import requests
import typer
from github.GithubException import GithubException
from rich import print as rprint
from rich.markup import escape
from rich.table import Table

from goship.config import Settings
from goship.exceptions import GoshipError
from goship.github.client import GitHubClient
from goship.github.commits import get_ticket_ids_from_commits
from goship.notify.dispatcher import Notifier, default_executor
from goship.state.loader import load_config
from goship.state.lookup import environment_from_name, project_from_name
from goship.state.models import host_status

app = typer.Typer(help="Track deployments and announce them on Pivotal Tracker.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_settings(require_token: bool = True) -> Settings:
    settings = Settings.load()
    issues = settings.validate()
    if not require_token:
        issues = [i for i in issues if "GitHub token" not in i]
    if issues:
        for issue in issues:
            rprint(f"[red]Config error: {issue}[/red]")
        raise typer.Exit(1)
    return settings


@app.command()
def projects(
    config_path: Path = typer.Option(None, "--config", "-c", help="Deployment state file"),
) -> None:
    """Show every host and whether it runs the head of its branch."""
    settings = _load_settings(require_token=False)
    try:
        config = load_config(config_path or settings.config_path)
    except GoshipError as e:
        rprint(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    table = Table(title="Deployments")
    table.add_column("Project")
    table.add_column("Environment")
    table.add_column("Host")
    table.add_column("Commit")
    table.add_column("Status")

    behind: list[tuple[str, str]] = []
    for project in config.projects:
        for environment in project.environments:
            env_label = environment.name + (" [yellow](locked)[/yellow]" if environment.is_locked else "")
            for host in environment.hosts:
                status = host_status(project, environment, host)
                commit = (
                    f"[link={status.github_commit_url}]{status.short_commit_hash}[/link]"
                    if status.short_commit_hash
                    else "-"
                )
                if status.up_to_date:
                    state = "[green]up to date[/green]"
                else:
                    state = "[yellow]behind[/yellow]"
                    behind.append((host.uri, status.github_diff_url))
                table.add_row(project.name, env_label, host.uri, commit, state)

    rprint(table)
    for uri, diff_url in behind:
        rprint(f"{uri}: {diff_url}")


@app.command()
def tickets(
    owner: str = typer.Argument(help="Repository owner"),
    repo_name: str = typer.Argument(help="Repository name"),
    current: str = typer.Argument(help="Previously deployed revision"),
    latest: str = typer.Argument(help="Newly deployed revision"),
) -> None:
    """List the Pivotal stories referenced between two revisions."""
    settings = _load_settings()
    client = GitHubClient(token=settings.github_token)
    try:
        ticket_ids = get_ticket_ids_from_commits(client, owner, repo_name, latest, current)
    except (GithubException, requests.RequestException) as e:
        rprint(f"[red]Could not compare {current}...{latest}: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    finally:
        client.close()

    if not ticket_ids:
        rprint("No stories referenced in this range")
        return
    for ticket_id in ticket_ids:
        rprint(f"#{ticket_id}")


@app.command()
def notify(
    project_name: str = typer.Argument(help="Project name"),
    environment_name: str = typer.Argument(help="Environment name"),
    current: str = typer.Option(..., help="Revision that was running before the deploy"),
    latest: str = typer.Option(
        None, help="Newly deployed revision (defaults to the branch head on GitHub)"
    ),
    config_path: Path = typer.Option(None, "--config", "-c", help="Deployment state file"),
) -> None:
    """Comment on every Pivotal story deployed to an environment."""
    settings = _load_settings()
    try:
        config = load_config(config_path or settings.config_path)
        project = project_from_name(config.projects, project_name)
        environment = environment_from_name(config.projects, project_name, environment_name)
    except GoshipError as e:
        rprint(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    if config.pivotal is None:
        rprint("[red]Pivotal is not configured for this deployment state[/red]")
        raise typer.Exit(1)

    latest = latest or environment.latest_github_commit
    if not latest:
        rprint(f"[red]No latest commit known for {project_name}/{environment_name}; pass --latest[/red]")
        raise typer.Exit(1)

    client = GitHubClient(token=settings.github_token)
    notifier = Notifier(
        client,
        executor=default_executor(settings.notify_workers),
        timezone=settings.timezone,
    )
    try:
        ticket_ids = notifier.post_to_pivotal(
            config.pivotal,
            environment.name,
            project.repo_owner,
            project.repo_name,
            latest,
            current,
        )
    except (GithubException, requests.RequestException) as e:
        rprint(f"[red]Could not determine deployed stories: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    finally:
        client.close()

    rprint(
        f"Notifying [bold]{len(ticket_ids)}[/bold] stories of the deploy to "
        f"[bold]{environment.name}[/bold]"
    )
