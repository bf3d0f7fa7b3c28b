#!/usr/bin/python3

import click
from ape import project
from ape.cli import ConnectedProviderCommand, account_option, network_option

from dpay_deployment.constants import REWARD_VAULT
from dpay_deployment.options import autosign_option, params_filepath_option
from dpay_deployment.params import Deployer
from dpay_deployment.utils import get_implementation_address, params_filepath_from_network


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@params_filepath_option
@autosign_option
def cli(network, account, params_filepath, autosign):
    """Upgrades the recorded RewardVault proxy to the RewardVaultV1 implementation."""
    deployer = Deployer.from_yaml(
        filepath=params_filepath or params_filepath_from_network(),
        account=account,
        autosign=autosign,
    )
    reward_vault = deployer.web3_utils.get_contract(REWARD_VAULT)
    previous_implementation = get_implementation_address(reward_vault.address)

    upgraded_vault = deployer.upgrade(project.RewardVaultV1, reward_vault.address)

    print(f"RewardVault proxy at: {upgraded_vault.address}")
    print(f"Previous implementation: {previous_implementation}")
    print(f"New implementation: {get_implementation_address(upgraded_vault.address)}")


if __name__ == "__main__":
    cli()
