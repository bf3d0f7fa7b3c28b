#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from dpay_deployment.constants import REWARD_VAULT
from dpay_deployment.db import Database
from dpay_deployment.options import delay_step_option, redeploy_option, registry_filepath_option
from dpay_deployment.utils import get_implementation_address
from dpay_deployment.web3_utils import Web3Utils


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@registry_filepath_option
@redeploy_option
@delay_step_option
def cli(network, account, registry_filepath, redeploy, delay_step):
    """Deploys the RewardVault behind a UUPS proxy, administered by the deployer."""
    web3_utils = Web3Utils(
        account=account,
        delay_step=delay_step,
        redeploy=redeploy,
        db=Database(registry_filepath),
    )
    reward_vault = web3_utils.deploy_proxy(REWARD_VAULT, args=[account.address])
    print(f"RewardVault implementation at: {get_implementation_address(reward_vault.address)}")


if __name__ == "__main__":
    cli()
