#!/usr/bin/python3

import os

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option
from ape.exceptions import ContractLogicError
from eth_utils import to_checksum_address

from dpay_deployment.constants import (
    CLAIM_REWARD,
    CLAIM_REWARD_ADDRESS_ENVVAR,
    REWARD_VAULT,
    REWARD_VAULT_ADDRESS_ENVVAR,
    TOKEN_ADDRESS_ENVVAR,
)
from dpay_deployment.db import Database
from dpay_deployment.options import registry_filepath_option, user_option
from dpay_deployment.web3_utils import Web3Utils


def _print_usage():
    print("\n=== Example Minting Order ===\n")
    print("To mint an order NFT:")
    print("order_nft.mintOrder(")
    print("    user_address,  # recipient")
    print("    product_id,    # e.g., 1")
    print("    amount,        # e.g., 10")
    print("    price,         # e.g., Web3.to_wei(1, 'ether')")
    print("    total_price,   # e.g., Web3.to_wei(10, 'ether')")
    print("    sender=minter,")
    print(")")

    print("\n=== Example Depositing Tokens ===\n")
    print("To deposit tokens into vault:")
    print("1. Approve tokens to vault: token.approve(reward_vault, amount, sender=treasury)")
    print("2. Deposit: reward_vault.depositTokens(token, amount, sender=treasury)")

    print("\n=== Example Claiming Rewards ===\n")
    print("To claim rewards, you need:")
    print("1. A valid signature from a SIGNER")
    print("2. Correct nonce")
    print("3. Valid deadline")
    print("4. Sufficient points (if enabled)")
    print("\nclaim_reward.claimReward(claim_data, signature, sender=user)")


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@registry_filepath_option
@user_option
def cli(network, account, registry_filepath, user):
    """
    Queries the deployed reward contracts for a user.
    Addresses come from the address book unless set in the environment.
    """
    user = user or account.address
    print(f"Account: {account.address}")
    print(f"User: {user}")

    web3_utils = Web3Utils(db=Database(registry_filepath))
    reward_vault = web3_utils.get_contract_from_env(REWARD_VAULT, REWARD_VAULT_ADDRESS_ENVVAR)
    claim_reward = web3_utils.get_contract_from_env(CLAIM_REWARD, CLAIM_REWARD_ADDRESS_ENVVAR)

    print("\n=== Example Operations ===\n")

    try:
        total_points = claim_reward.calculateTotalPoints(user)
        print(f"User total points: {total_points}")
    except ContractLogicError:
        print("Could not calculate points (no NFTs minted yet)")

    try:
        available_points = claim_reward.getAvailablePoints(user)
        print(f"User available points: {available_points}")
    except ContractLogicError:
        print("Could not get available points")

    nonce = claim_reward.getUserNonce(user)
    print(f"User nonce: {nonce}")

    token_address = os.environ.get(TOKEN_ADDRESS_ENVVAR)
    if token_address:
        balance = reward_vault.getTokenBalance(to_checksum_address(token_address))
        print(f"Vault token balance: {balance}")

    _print_usage()


if __name__ == "__main__":
    cli()
