#!/usr/bin/python3

import click
from ape.cli import ConnectedProviderCommand, account_option, network_option

from dpay_deployment.constants import (
    ADMIN_ROLE,
    CLAIM_REWARD,
    CLAIM_REWARD_ADDRESS_ENVVAR,
    CLAIMER_ROLE,
    MINTER_ROLE,
    ORDER_NFT,
    ORDER_NFT_ADDRESS_ENVVAR,
    REWARD_VAULT,
    REWARD_VAULT_ADDRESS_ENVVAR,
    SIGNER_ROLE,
    TREASURY_ROLE,
)
from dpay_deployment.db import Database
from dpay_deployment.options import registry_filepath_option
from dpay_deployment.web3_utils import Web3Utils


def _check(label: str, result: bool) -> bool:
    click.secho(f"{label}: {result}", fg="green" if result else "red")
    return result


def _has_role(contract, role_name: str, holder) -> bool:
    role = getattr(contract, role_name)()
    return contract.hasRole(role, holder)


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@registry_filepath_option
def cli(network, account, registry_filepath):
    """Verifies role wiring and settings of the deployed reward contracts."""
    deployer_address = account.address
    print(f"Verifying deployment for deployer: {deployer_address}")

    web3_utils = Web3Utils(db=Database(registry_filepath))
    order_nft = web3_utils.get_contract_from_env(ORDER_NFT, ORDER_NFT_ADDRESS_ENVVAR)
    reward_vault = web3_utils.get_contract_from_env(REWARD_VAULT, REWARD_VAULT_ADDRESS_ENVVAR)
    claim_reward = web3_utils.get_contract_from_env(CLAIM_REWARD, CLAIM_REWARD_ADDRESS_ENVVAR)

    print("\nContract Addresses:")
    print(f"OrderNFT: {order_nft.address}")
    print(f"RewardVault: {reward_vault.address}")
    print(f"ClaimReward: {claim_reward.address}")

    checks = list()

    print("\n=== Verifying OrderNFT ===")
    checks.append(
        _check(
            "Deployer has MINTER_ROLE", _has_role(order_nft, MINTER_ROLE, deployer_address)
        )
    )
    print(f"Total NFTs minted: {order_nft.totalSupply()}")

    print("\n=== Verifying RewardVault ===")
    checks.append(
        _check(
            "Deployer has TREASURY_ROLE",
            _has_role(reward_vault, TREASURY_ROLE, deployer_address),
        )
    )
    checks.append(
        _check(
            "ClaimReward has CLAIMER_ROLE",
            _has_role(reward_vault, CLAIMER_ROLE, claim_reward.address),
        )
    )
    checks.append(
        _check("Deployer has ADMIN_ROLE", _has_role(reward_vault, ADMIN_ROLE, deployer_address))
    )

    print("\n=== Verifying ClaimReward ===")
    checks.append(
        _check(
            "Deployer has SIGNER_ROLE", _has_role(claim_reward, SIGNER_ROLE, deployer_address)
        )
    )
    vault_address = claim_reward.vault()
    print(f"Connected vault: {vault_address}")
    checks.append(
        _check(
            "Connected to correct vault",
            vault_address.lower() == reward_vault.address.lower(),
        )
    )

    min_points = claim_reward.minPointsToClaim()
    print(f"Minimum points to claim: {min_points}")
    if min_points > 0:
        print("Points validation is ENABLED")
    else:
        print("Points validation is DISABLED")

    print("\n=== Verification Complete ===")
    if not all(checks):
        raise click.ClickException(f"{checks.count(False)} check(s) failed")


if __name__ == "__main__":
    cli()
