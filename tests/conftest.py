from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from eth_utils import to_checksum_address

from dpay_deployment.db import Database

NETWORK = "somnia"
CHAIN_ID = 50312


def address(n: int) -> str:
    return to_checksum_address(f"0x{n:040x}")


def abi_input(name, type_):
    return SimpleNamespace(name=name, type=type_)


class FakeContainer:
    """Minimal stand-in for an ape ContractContainer."""

    def __init__(self, name, constructor_inputs=(), methods=()):
        self.contract_type = SimpleNamespace(name=name, methods=list(methods))
        self.constructor = SimpleNamespace(abi=SimpleNamespace(inputs=list(constructor_inputs)))

    def at(self, contract_address):
        return SimpleNamespace(address=contract_address, contract_type=self.contract_type)


class FakeAccount:
    """Stand-in for an ape account; deploys at sequential addresses."""

    def __init__(self, account_address=None):
        self.address = account_address or address(0xD1)
        self.deployed = list()
        self.set_autosign = MagicMock()
        self._next = 0x1000

    def deploy(self, container, *args, **kwargs):
        self._next += 1
        self.deployed.append((container, args))
        instance = container.at(address(self._next))
        instance.initialize = SimpleNamespace(
            encode_input=lambda *a: b"init:" + b"".join(bytes.fromhex(x[2:]) for x in a)
        )
        return instance


@pytest.fixture
def db(tmp_path):
    return Database(tmp_path / "artifacts" / "addresses.json")


@pytest.fixture
def deployer_account():
    return FakeAccount()


@pytest.fixture
def containers():
    return {
        "OrderNFT": FakeContainer(
            "OrderNFT",
            constructor_inputs=[
                abi_input("name", "string"),
                abi_input("symbol", "string"),
                abi_input("admin", "address"),
            ],
        ),
        "RewardVault": FakeContainer(
            "RewardVault",
            methods=[
                SimpleNamespace(name="initialize", inputs=[abi_input("admin", "address")]),
            ],
        ),
        "ClaimReward": FakeContainer(
            "ClaimReward",
            constructor_inputs=[
                abi_input("vault", "address"),
                abi_input("orderNFT", "address"),
                abi_input("admin", "address"),
            ],
        ),
        "Token": FakeContainer(
            "Token",
            constructor_inputs=[
                abi_input("name", "string"),
                abi_input("symbol", "string"),
                abi_input("initialSupply", "uint256"),
            ],
        ),
    }


@pytest.fixture
def oz_dependency():
    return SimpleNamespace(ERC1967Proxy=FakeContainer("ERC1967Proxy"))


@pytest.fixture
def connected(monkeypatch, containers, oz_dependency):
    """Pretends the somnia network is connected and the project is compiled."""
    sleeps = list()

    def get_contract_container(name):
        try:
            return containers[name]
        except KeyError:
            raise ValueError(f"No contract found with name '{name}'.")

    for module in ("dpay_deployment.web3_utils", "dpay_deployment.params"):
        monkeypatch.setattr(f"{module}.get_contract_container", get_contract_container)
        monkeypatch.setattr(f"{module}.get_network_name", lambda: NETWORK)
    for module in ("dpay_deployment.utils", "dpay_deployment.params"):
        monkeypatch.setattr(f"{module}.get_chain_id", lambda: CHAIN_ID)
    monkeypatch.setattr("dpay_deployment.utils.is_local_network", lambda: False)
    monkeypatch.setattr("dpay_deployment.web3_utils.get_oz_dependency", lambda: oz_dependency)
    monkeypatch.setattr("dpay_deployment.web3_utils.delay", sleeps.append)
    monkeypatch.setattr("dpay_deployment.params.delay", sleeps.append)
    return SimpleNamespace(sleeps=sleeps, containers=containers)
