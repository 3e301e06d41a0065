# src/issue_engagement/cli/weights.py

"""CLI command for inspecting the effective engagement weights."""

import json

import click
from rich.console import Console
from rich.table import Table

from ..config.config_file import config_as_dict, load_config
from ..engine.weights import (
    FLAT_FACTORS,
    ROLE_WEIGHTED_FACTORS,
    ContributorRole,
    get_weight_for_role,
)

console = Console()


@click.command()
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
@click.option("--json", "as_json", is_flag=True, help="Print the weights as JSON.")
def weights_command(config_path, workspace, as_json):
    """Shows the weights each contributor role resolves to."""
    config = load_config(workspace, config_path)

    if as_json:
        click.echo(json.dumps(config_as_dict(config), indent=2))
        return

    weights = config.weights.to_config()
    table = Table(
        title="Engagement Weights", show_header=True, header_style="bold magenta"
    )
    table.add_column("Factor", style="cyan")
    for role in ContributorRole:
        table.add_column(role.value, style="green", justify="right")

    for factor in ROLE_WEIGHTED_FACTORS:
        spec = getattr(config.weights, factor)
        table.add_row(
            factor, *(f"{get_weight_for_role(spec, role):g}" for role in ContributorRole)
        )
    for factor in FLAT_FACTORS:
        table.add_row(factor, f"{weights[factor]:g}", *("" for _ in range(4)))

    console.print(table)
