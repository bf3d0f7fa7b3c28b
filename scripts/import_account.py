#!/usr/bin/env python3

import os

import click
from ape_accounts import import_account_from_private_key

from dpay_deployment.constants import PASSPHRASE_ENVVAR, PRIVATE_KEY_ENVVAR


@click.command()
@click.option(
    "--alias",
    help="Alias of the account in the ape keystore",
    default="DEPLOYER",
    show_default=True,
)
def cli(alias):
    """Imports the deployer private key from the environment into the ape keystore."""
    try:
        passphrase = os.environ[PASSPHRASE_ENVVAR]
        private_key = os.environ[PRIVATE_KEY_ENVVAR]
    except KeyError:
        raise click.ClickException(
            "There are missing environment variables. "
            f"Please set {PASSPHRASE_ENVVAR} and {PRIVATE_KEY_ENVVAR}."
        )
    account = import_account_from_private_key(alias, passphrase, private_key)
    print(f"Account imported: {account.address}")


if __name__ == "__main__":
    cli()
