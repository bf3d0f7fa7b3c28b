#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from dpay_deployment.constants import REWARD_MANAGER
from dpay_deployment.db import Database
from dpay_deployment.options import registry_filepath_option, user_option
from dpay_deployment.web3_utils import Web3Utils


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@registry_filepath_option
@user_option
def cli(network, account, registry_filepath, user):
    """Prints the RewardManager points of a user."""
    user = user or account.address
    reward_manager = Web3Utils(db=Database(registry_filepath)).get_contract(REWARD_MANAGER)
    points = reward_manager.userPoints(user)
    print(f"Points of {user}: {points}")


if __name__ == "__main__":
    cli()
