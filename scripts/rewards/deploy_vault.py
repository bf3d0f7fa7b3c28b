#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from dpay_deployment.constants import POINTS_MANAGER_ROLE, REWARD_MANAGER, TOKEN, VAULT
from dpay_deployment.db import Database
from dpay_deployment.options import (
    autosign_option,
    delay_step_option,
    redeploy_option,
    registry_filepath_option,
)
from dpay_deployment.params import Transactor
from dpay_deployment.web3_utils import Web3Utils


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@registry_filepath_option
@redeploy_option
@delay_step_option
@autosign_option
def cli(network, account, registry_filepath, redeploy, delay_step, autosign):
    """Deploys the Vault for the recorded Token and lets it manage RewardManager points."""
    transactor = Transactor(account, autosign=autosign)
    web3_utils = Web3Utils(
        account=account,
        delay_step=delay_step,
        redeploy=redeploy,
        db=Database(registry_filepath),
    )

    token = web3_utils.get_contract(TOKEN)
    reward_manager = web3_utils.get_contract(REWARD_MANAGER)
    vault = web3_utils.deploy_contract(VAULT, [token.address, reward_manager.address])

    transactor.grant_role(reward_manager, POINTS_MANAGER_ROLE, vault.address)


if __name__ == "__main__":
    cli()
