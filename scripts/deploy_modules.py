#!/usr/bin/python3

import click
from ape import project
from ape.cli import ConnectedProviderCommand, account_option, network_option

from dpay_deployment.constants import MODULES_PARAMS_FILENAME
from dpay_deployment.options import (
    autosign_option,
    delay_step_option,
    params_filepath_option,
    redeploy_option,
)
from dpay_deployment.params import Deployer
from dpay_deployment.utils import params_filepath_from_network


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@params_filepath_option
@redeploy_option
@delay_step_option
@autosign_option
def cli(network, account, params_filepath, redeploy, delay_step, autosign):
    """
    Deploys the bare contract modules: OrderNFT, the RewardVault implementation
    (the base contract, no proxy) and ClaimReward with a zero vault address.
    The vault is wired into ClaimReward once a vault proxy has been deployed.
    """
    deployer = Deployer.from_yaml(
        filepath=params_filepath
        or params_filepath_from_network(filename=MODULES_PARAMS_FILENAME),
        account=account,
        autosign=autosign,
        redeploy=redeploy,
        delay_step=delay_step,
    )

    order_nft = deployer.deploy(project.OrderNFT)
    reward_vault_implementation = deployer.deploy(project.RewardVault)
    claim_reward = deployer.deploy(project.ClaimReward)

    deployments = [order_nft, reward_vault_implementation, claim_reward]
    deployer.finalize(deployments=deployments)


if __name__ == "__main__":
    cli()
