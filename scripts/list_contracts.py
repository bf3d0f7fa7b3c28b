#!/usr/bin/python3

from itertools import groupby
from pathlib import Path
from typing import List

import click

from dpay_deployment.constants import SUPPORTED_NETWORKS
from dpay_deployment.db import AddressRecord, Database


def _display_records(records: List[AddressRecord]) -> None:
    """Display address book records grouped by network."""
    if not records:
        click.secho("No contracts recorded.", fg="yellow")
        return

    for network, network_records in groupby(records, key=lambda r: r.network):
        click.secho(f"\n{network.capitalize()}", fg="green")
        for index, record in enumerate(network_records, start=1):
            click.secho(f"    {index}. {record.name} {record.address}", fg="cyan")


@click.command(name="list-contracts")
@click.option(
    "--network-name",
    "-n",
    help="Only list contracts of this network",
    type=click.Choice(SUPPORTED_NETWORKS),
)
@click.option(
    "--registry-filepath",
    "-f",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    help="Address book to read; defaults to the project address book",
    required=False,
)
def cli(network_name, registry_filepath):
    """List all contracts in the address book. Optionally filter by network."""
    db = Database(registry_filepath)
    _display_records(db.records(network=network_name))


if __name__ == "__main__":
    cli()
