from pathlib import Path

import dpay_deployment

#
# Filesystem
#

DEPLOYMENT_DIR = Path(dpay_deployment.__file__).parent
CONSTRUCTOR_PARAMS_DIR = DEPLOYMENT_DIR / "constructor_params"
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"

ADDRESS_BOOK_FILENAME = "addresses.json"
REWARDS_PARAMS_FILENAME = "rewards.yml"
MODULES_PARAMS_FILENAME = "modules.yml"

#
# Networks
#

LOCAL = "local"
GANACHE = "ganache"
SOMNIA = "somnia"

SUPPORTED_NETWORKS = [LOCAL, GANACHE, SOMNIA]

#
# Deployment settings
#

# milliseconds slept before each deployment transaction
DEFAULT_DELAY_STEP = 1000
DEFAULT_REDEPLOY = False

#
# Contracts
#

ORDER_NFT = "OrderNFT"
REWARD_VAULT = "RewardVault"
REWARD_VAULT_V1 = "RewardVaultV1"
CLAIM_REWARD = "ClaimReward"
REWARD_MANAGER = "RewardManager"
VAULT = "Vault"
TOKEN = "Token"

OZ_DEPENDENCY_NAME = "openzeppelin"
OZ_DEPENDENCY_VERSION = "5.0.0"
UUPS_PROXY_NAME = "ERC1967Proxy"

# EIP1967 Implementation slot - https://eips.ethereum.org/EIPS/eip-1967#logic-contract-address
EIP1967_IMPLEMENTATION_SLOT = 0x360894A13BA1A3210667C828492DB98DCA3E2076CC3735A920A3CA505D382BBC

#
# Roles (names of the public role getters on the contracts)
#

ADMIN_ROLE = "ADMIN_ROLE"
MINTER_ROLE = "MINTER_ROLE"
TREASURY_ROLE = "TREASURY_ROLE"
CLAIMER_ROLE = "CLAIMER_ROLE"
SIGNER_ROLE = "SIGNER_ROLE"
POINTS_MANAGER_ROLE = "POINTS_MANAGER_ROLE"

#
# Environment
#

PRIVATE_KEY_ENVVAR = "PRIVATE_KEY"
PASSPHRASE_ENVVAR = "DEPLOYER_PASSPHRASE"
ORDER_NFT_ADDRESS_ENVVAR = "ORDER_NFT_ADDRESS"
REWARD_VAULT_ADDRESS_ENVVAR = "REWARD_VAULT_ADDRESS"
CLAIM_REWARD_ADDRESS_ENVVAR = "CLAIM_REWARD_ADDRESS"
TOKEN_ADDRESS_ENVVAR = "TOKEN_ADDRESS"
