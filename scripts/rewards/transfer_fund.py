#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option
from web3 import Web3

from dpay_deployment.constants import TOKEN, VAULT
from dpay_deployment.db import Database
from dpay_deployment.options import amount_option, autosign_option, registry_filepath_option
from dpay_deployment.params import Transactor
from dpay_deployment.web3_utils import Web3Utils


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@registry_filepath_option
@amount_option
@autosign_option
def cli(network, account, registry_filepath, amount, autosign):
    """Approves the Vault for an amount of Token and transfers it through the Vault."""
    transactor = Transactor(account, autosign=autosign)
    web3_utils = Web3Utils(db=Database(registry_filepath))

    vault = web3_utils.get_contract(VAULT)
    token = web3_utils.get_contract(TOKEN)

    amount_wei = Web3.to_wei(amount, "ether")
    transactor.transact(token.approve, vault.address, amount_wei)
    receipt = transactor.transact(vault.transferFunds, token.address, amount_wei)
    print(f"Fund transferred successfully: {receipt.txn_hash}")


if __name__ == "__main__":
    cli()
