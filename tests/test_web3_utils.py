import pytest

from dpay_deployment.web3_utils import Web3Utils

from tests.conftest import NETWORK, address


@pytest.fixture
def web3_utils(connected, deployer_account, db):
    return Web3Utils(account=deployer_account, delay_step=0, redeploy=False, db=db)


def test_defaults(db):
    web3_utils = Web3Utils(db=db)
    assert web3_utils.delay_step == 1000
    assert web3_utils.redeploy is False
    assert web3_utils.account is None


def test_deploy_without_record(web3_utils, deployer_account, db, connected):
    token = web3_utils.deploy_contract("Token", ["USD Test token", "USDT", 10**27])

    assert len(deployer_account.deployed) == 1
    container, args = deployer_account.deployed[0]
    assert container is connected.containers["Token"]
    assert args == ("USD Test token", "USDT", 10**27)
    assert db.read(NETWORK, "Token") == token.address
    assert connected.sleeps == [0]


def test_existing_record_is_reused(web3_utils, deployer_account, db):
    db.write(NETWORK, "Token", address(0xAA))

    token = web3_utils.deploy_contract("Token", ["USD Test token", "USDT", 10**27])

    assert token.address == address(0xAA)
    assert token.contract_type.name == "Token"
    assert deployer_account.deployed == []
    assert db.read(NETWORK, "Token") == address(0xAA)


def test_redeploy_overwrites_record(web3_utils, deployer_account, db):
    db.write(NETWORK, "Token", address(0xAA))
    web3_utils.redeploy = True

    token = web3_utils.deploy_contract("Token", ["USD Test token", "USDT", 10**27])

    assert len(deployer_account.deployed) == 1
    assert token.address != address(0xAA)
    assert db.read(NETWORK, "Token") == token.address


def test_redeploy_without_record(web3_utils, deployer_account, db):
    web3_utils.redeploy = True
    token = web3_utils.deploy_contract("Token", [])
    assert len(deployer_account.deployed) == 1
    assert db.read(NETWORK, "Token") == token.address


def test_record_of_other_network_is_not_reused(web3_utils, deployer_account, db):
    db.write("ganache", "Token", address(0xAA))
    token = web3_utils.deploy_contract("Token", [])
    assert len(deployer_account.deployed) == 1
    assert db.read("ganache", "Token") == address(0xAA)
    assert db.read(NETWORK, "Token") == token.address


def test_deploy_requires_account(connected, db):
    web3_utils = Web3Utils(delay_step=0, db=db)
    with pytest.raises(ValueError, match="account is required"):
        web3_utils.deploy_contract("Token", [])
    assert db.read(NETWORK, "Token") is None


def test_deploy_failure_propagates(web3_utils, deployer_account, db):
    def fail(*args, **kwargs):
        raise RuntimeError("out of gas")

    deployer_account.deploy = fail
    with pytest.raises(RuntimeError, match="out of gas"):
        web3_utils.deploy_contract("Token", [])
    assert db.read(NETWORK, "Token") is None


def test_is_deployed(web3_utils, db):
    assert not web3_utils.is_deployed("Token")
    db.write(NETWORK, "Token", address(0xAA))
    assert web3_utils.is_deployed("Token")
    assert not web3_utils.is_deployed("Token", network="ganache")
    web3_utils.redeploy = True
    assert not web3_utils.is_deployed("Token")


def test_get_contract(web3_utils, db):
    db.write(NETWORK, "OrderNFT", address(1))
    db.write("ganache", "OrderNFT", address(2))

    assert web3_utils.get_contract("OrderNFT").address == address(1)
    assert web3_utils.get_contract("OrderNFT", network="ganache").address == address(2)


def test_get_missing_contract(web3_utils):
    with pytest.raises(Web3Utils.ContractNotFound, match="'OrderNFT' not found"):
        web3_utils.get_contract("OrderNFT")
    # not found is also a ValueError
    with pytest.raises(ValueError):
        web3_utils.get_contract("OrderNFT", network="ganache")


def test_get_contract_from_env(web3_utils, db, monkeypatch):
    db.write(NETWORK, "ClaimReward", address(1))
    monkeypatch.delenv("CLAIM_REWARD_ADDRESS", raising=False)
    assert web3_utils.get_contract_from_env("ClaimReward", "CLAIM_REWARD_ADDRESS").address == (
        address(1)
    )

    monkeypatch.setenv("CLAIM_REWARD_ADDRESS", address(2).lower())
    instance = web3_utils.get_contract_from_env("ClaimReward", "CLAIM_REWARD_ADDRESS")
    assert instance.address == address(2)


def test_deploy_proxy(web3_utils, deployer_account, db, connected, oz_dependency):
    admin = deployer_account.address

    reward_vault = web3_utils.deploy_proxy("RewardVault", args=[admin])

    assert len(deployer_account.deployed) == 2
    (implementation_container, implementation_args), (proxy_container, proxy_args) = (
        deployer_account.deployed
    )
    assert implementation_container is connected.containers["RewardVault"]
    assert implementation_args == ()
    assert proxy_container is oz_dependency.ERC1967Proxy
    implementation_address, initializer_data = proxy_args
    assert initializer_data == b"init:" + bytes.fromhex(admin[2:])

    # the proxy is recorded and typed as the implementation
    assert reward_vault.address != implementation_address
    assert reward_vault.contract_type.name == "RewardVault"
    assert db.read(NETWORK, "RewardVault") == reward_vault.address
    assert connected.sleeps == [0, 0]


def test_deploy_proxy_reuses_record(web3_utils, deployer_account, db):
    db.write(NETWORK, "RewardVault", address(0xBB))
    reward_vault = web3_utils.deploy_proxy("RewardVault", args=[deployer_account.address])
    assert reward_vault.address == address(0xBB)
    assert deployer_account.deployed == []


def test_local_network_records_are_not_reused(web3_utils, deployer_account, db, monkeypatch):
    monkeypatch.setattr("dpay_deployment.web3_utils.get_network_name", lambda: "local")
    db.write("local", "Token", address(0xAA))
    db.write("local", "RewardVault", address(0xBB))

    assert not web3_utils.is_deployed("Token")
    token = web3_utils.deploy_contract("Token", [])
    reward_vault = web3_utils.deploy_proxy("RewardVault", args=[deployer_account.address])

    # implementation and proxy for the vault, plus the token
    assert len(deployer_account.deployed) == 3
    assert db.read("local", "Token") == token.address != address(0xAA)
    assert db.read("local", "RewardVault") == reward_vault.address != address(0xBB)
