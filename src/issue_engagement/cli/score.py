# src/issue_engagement/cli/score.py

"""CLI command for scoring issue engagement."""

import json

import click
import requests
from rich.console import Console
from rich.table import Table

from ..config.config_file import load_config
from ..config.settings import get_settings
from ..data.client import GitHubGraphQLClient
from ..data.fetcher import GitHubDataFetcher
from ..data.projects import ProjectScoreWriter
from ..data.roles import CachedRoleResolver, GitHubRoleResolver
from ..engine.models import EngagementResponse
from ..engine.runner import EngagementRunner
from ..engine.scorer import EngagementScorer
from ..utils.helpers import now_utc

console = Console()


def render_response(response: EngagementResponse) -> Table:
    table = Table(
        title="Issue Engagement", show_header=True, header_style="bold magenta"
    )
    table.add_column("Issue", style="cyan")
    table.add_column("Score", style="green", justify="right")
    table.add_column("Previous", style="dim", justify="right")
    table.add_column("Classification", style="bold red")

    for item in response.items:
        issue = item.issue
        classification = item.engagement.classification
        table.add_row(
            f"{issue.owner}/{issue.repo}#{issue.number}",
            str(item.engagement.score),
            str(item.engagement.previous_score),
            classification.value if classification else "",
        )
    return table


@click.command()
@click.option("--issue", "issue_number", type=int, help="Issue number to score.")
@click.option(
    "--project", "project_number", type=int, help="Project number to score."
)
@click.option("--owner", help="Repository owner (defaults to GITHUB_OWNER).")
@click.option("--repo", help="Repository name (defaults to GITHUB_REPO).")
@click.option(
    "--config",
    "config_path",
    default=None,
    help="Path to a .triagerc.yml file.",
    type=click.Path(dir_okay=False),
)
@click.option(
    "--workspace",
    default=".",
    help="Directory searched for .triagerc.yml when --config is not given.",
    type=click.Path(file_okay=False, dir_okay=True),
)
@click.option(
    "--output",
    default="engagement-response.json",
    help="Path for the engagement response JSON file.",
    type=click.Path(dir_okay=False),
)
@click.option(
    "--apply/--no-apply",
    "apply_scores",
    default=None,
    help="Write scores back to the project field (defaults to APPLY_SCORES).",
)
@click.option("--column", "project_column", help="Project field to write scores to.")
@click.option("--max-workers", type=int, help="Concurrent issue lookups.")
def score_command(
    issue_number,
    project_number,
    owner,
    repo,
    config_path,
    workspace,
    output,
    apply_scores,
    project_column,
    max_workers,
):
    """Calculates engagement scores for an issue or a project board."""
    overrides = {
        "issue_number": issue_number,
        "project_number": project_number,
        "github_owner": owner,
        "github_repo": repo,
        "apply_scores": apply_scores,
        "project_column": project_column,
        "max_workers": max_workers,
    }
    try:
        settings = get_settings(
            **{key: value for key, value in overrides.items() if value is not None}
        )
    except ValueError as e:
        raise click.ClickException(f"Invalid settings: {e}")

    if not settings.project_number and not settings.issue_number:
        raise click.UsageError("Either --project or --issue must be specified")

    config = load_config(workspace, config_path)
    client = GitHubGraphQLClient(settings.github_token, timeout=settings.request_timeout)

    # Role windows and score decay are measured from the same instant
    started_at = now_utc()

    def run_clock():
        return started_at

    scorer = EngagementScorer(
        config.weights,
        config.groups,
        CachedRoleResolver(GitHubRoleResolver(client, clock=run_clock)),
    )
    runner = EngagementRunner(
        GitHubDataFetcher(client),
        scorer,
        max_workers=settings.max_workers,
        clock=run_clock,
    )

    try:
        with console.status("[bold green]Calculating engagement scores..."):
            if settings.project_number:
                response = runner.score_project(
                    settings.github_owner, settings.github_repo, settings.project_number
                )
            else:
                response = runner.score_issue(
                    settings.github_owner, settings.github_repo, settings.issue_number
                )
    except (requests.RequestException, ValueError) as e:
        raise click.ClickException(str(e))

    console.print(render_response(response))

    with open(output, "w", encoding="utf-8") as f:
        json.dump(response.to_json_dict(), f, indent=2)
    console.print(f"[green]Engagement response saved to {output}[/green]")

    if settings.apply_scores:
        if not settings.project_number:
            console.print("[yellow]Skipping project update: no project given.[/yellow]")
            return
        updated = ProjectScoreWriter(client).apply(
            response,
            settings.github_owner,
            settings.github_repo,
            settings.project_number,
            settings.project_column,
        )
        console.print(f"[green]Updated {updated} project items.[/green]")
