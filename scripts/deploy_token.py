#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option
from web3 import Web3

from dpay_deployment.constants import TOKEN
from dpay_deployment.db import Database
from dpay_deployment.options import delay_step_option, redeploy_option, registry_filepath_option
from dpay_deployment.web3_utils import Web3Utils

TOKEN_NAME = "USD Test token"
TOKEN_SYMBOL = "USDT"
TOKEN_SUPPLY = Web3.to_wei(1_000_000_000, "ether")


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@registry_filepath_option
@redeploy_option
@delay_step_option
def cli(network, account, registry_filepath, redeploy, delay_step):
    """Deploys the test ERC20 token used to fund the vaults."""
    web3_utils = Web3Utils(
        account=account,
        delay_step=delay_step,
        redeploy=redeploy,
        db=Database(registry_filepath),
    )
    web3_utils.deploy_contract(TOKEN, [TOKEN_NAME, TOKEN_SYMBOL, TOKEN_SUPPLY])


if __name__ == "__main__":
    cli()
