#!/usr/bin/python3

import click
from ape import project
from ape.cli import ConnectedProviderCommand, account_option, network_option

from dpay_deployment.constants import CLAIMER_ROLE, MINTER_ROLE, SIGNER_ROLE, TREASURY_ROLE
from dpay_deployment.options import (
    autosign_option,
    delay_step_option,
    params_filepath_option,
    redeploy_option,
)
from dpay_deployment.params import Deployer
from dpay_deployment.utils import get_implementation_address, params_filepath_from_network


@click.command(cls=ConnectedProviderCommand)
@network_option(required=True)
@account_option()
@params_filepath_option
@redeploy_option
@delay_step_option
@autosign_option
def cli(network, account, params_filepath, redeploy, delay_step, autosign):
    """
    Deploys OrderNFT, the RewardVault (UUPS proxy) and ClaimReward, then wires their roles.

    Contracts already recorded in the address book for the network are reused
    unless --redeploy is given.

    ape run deploy --network ethereum:somnia:node --account <alias>
    """
    deployer = Deployer.from_yaml(
        filepath=params_filepath or params_filepath_from_network(),
        account=account,
        autosign=autosign,
        redeploy=redeploy,
        delay_step=delay_step,
    )
    deployer_address = deployer.get_account().address

    print("\n=== Step 1: OrderNFT ===\n")
    order_nft = deployer.deploy(project.OrderNFT)
    deployer.grant_role(order_nft, MINTER_ROLE, deployer_address)

    print("\n=== Step 2: RewardVault (UUPS) ===\n")
    reward_vault = deployer.deploy(project.RewardVault)
    implementation_address = get_implementation_address(reward_vault.address)
    print(f"RewardVault proxy at: {reward_vault.address}")
    print(f"RewardVault implementation at: {implementation_address}")
    deployer.grant_role(reward_vault, TREASURY_ROLE, deployer_address)

    print("\n=== Step 3: ClaimReward ===\n")
    claim_reward = deployer.deploy(project.ClaimReward)
    deployer.grant_role(claim_reward, SIGNER_ROLE, deployer_address)

    print("\n=== Step 4: Role Permissions ===\n")
    deployer.grant_role(reward_vault, CLAIMER_ROLE, claim_reward.address)

    deployments = [order_nft, reward_vault, claim_reward]
    roles = {
        "minter": deployer_address,
        "treasury": deployer_address,
        "signer": deployer_address,
        "claimer": claim_reward.address,
    }
    deployer.finalize(deployments=deployments, roles=roles)

    print("\nNext steps:")
    print("1. Fund RewardVault with tokens using depositTokens()")
    print("2. Mint order NFTs using mintOrder() on OrderNFT")
    print("3. Sign claim messages and call claimReward() on ClaimReward")


if __name__ == "__main__":
    cli()
