import os
from typing import Any, Optional, Sequence

from ape.api import AccountAPI
from ape.contracts import ContractInstance
from eth_utils import to_checksum_address

from dpay_deployment.constants import DEFAULT_DELAY_STEP, DEFAULT_REDEPLOY, LOCAL, UUPS_PROXY_NAME
from dpay_deployment.db import Database
from dpay_deployment.networks import get_network_name
from dpay_deployment.utils import delay, get_contract_container, get_oz_dependency


class Web3Utils:
    """
    Deploys contracts from an ape account and records every deployment in the
    address book, so that repeated script runs reuse what is already on chain.

    With ``redeploy=False`` a contract that has a record for the current network
    is bound to its recorded address instead of being deployed again; with
    ``redeploy=True`` a new deployment always happens and overwrites the record.
    Records of the local test network are written but never reused.
    """

    class ContractNotFound(ValueError):
        """Raised when the address book has no record for a contract"""

    def __init__(
        self,
        account: Optional[AccountAPI] = None,
        delay_step: Optional[int] = None,
        redeploy: Optional[bool] = None,
        db: Optional[Database] = None,
    ):
        self.account = account
        self.delay_step = DEFAULT_DELAY_STEP if delay_step is None else delay_step
        self.redeploy = DEFAULT_REDEPLOY if redeploy is None else redeploy
        self.db = db or Database()

    def _get_account(self) -> AccountAPI:
        if self.account is None:
            raise ValueError("A deployer account is required to deploy contracts.")
        return self.account

    def is_deployed(self, contract_name: str, network: Optional[str] = None) -> bool:
        """Returns True if a deployment of the contract would be skipped."""
        if self.redeploy:
            return False
        network = network or get_network_name()
        if network == LOCAL:
            # the local test chain starts empty on every run
            return False
        return self.db.read(network, contract_name) is not None

    def _reuse(self, contract_name: str, network: str) -> Optional[ContractInstance]:
        if not self.is_deployed(contract_name, network):
            return None
        address = self.db.read(network, contract_name)
        print(f"(i) Reusing {contract_name} on {network} at {address}")
        return get_contract_container(contract_name).at(address)

    def get_contract(self, contract_name: str, network: Optional[str] = None) -> ContractInstance:
        """
        Get a recorded contract from the address book.

        :param contract_name: Name of the contract
        :param network: Network name, defaults to the connected network
        :returns: Contract instance bound to the recorded address
        """
        network = network or get_network_name()
        address = self.db.read(network, contract_name)
        if not address:
            raise self.ContractNotFound(
                f"Contract '{contract_name}' not found in {self.db.filepath} "
                f"for network '{network}'"
            )
        return get_contract_container(contract_name).at(address)

    def deploy_contract(self, contract_name: str, args: Sequence[Any] = ()) -> ContractInstance:
        """
        Deploy a contract on the connected network, then record it in the address book.

        :param contract_name: Name of the contract
        :param args: Constructor arguments
        :returns: Deployed (or reused) contract instance
        """
        network = get_network_name()
        instance = self._reuse(contract_name, network)
        if instance is not None:
            return instance

        account = self._get_account()
        container = get_contract_container(contract_name)
        print(f"Deploy {contract_name} on {network}...")
        delay(self.delay_step)
        instance = account.deploy(container, *args)

        address = self.db.write(network, contract_name, instance.address)
        print(f"Deploy success {contract_name}, address: {address}")
        return instance

    def deploy_proxy(
        self, contract_name: str, initializer: str = "initialize", args: Sequence[Any] = ()
    ) -> ContractInstance:
        """
        Deploy an upgradeable (UUPS) contract: the implementation, then an ERC1967
        proxy initialized with ``initializer(*args)``. The proxy address is recorded.

        :returns: Proxy contract instance typed as the implementation
        """
        network = get_network_name()
        instance = self._reuse(contract_name, network)
        if instance is not None:
            return instance

        account = self._get_account()
        container = get_contract_container(contract_name)
        print(f"Deploy {contract_name} implementation on {network}...")
        delay(self.delay_step)
        implementation = account.deploy(container)

        initializer_data = getattr(implementation, initializer).encode_input(*args)
        print(f"Deploy {UUPS_PROXY_NAME} for {contract_name} on {network}...")
        delay(self.delay_step)
        proxy_container = getattr(get_oz_dependency(), UUPS_PROXY_NAME)
        proxy = account.deploy(proxy_container, implementation.address, initializer_data)

        address = self.db.write(network, contract_name, proxy.address)
        print(
            f"Deploy success {contract_name}, proxy: {address}, "
            f"implementation: {implementation.address}"
        )
        return container.at(address)

    def get_contract_from_env(self, contract_name: str, envvar: str) -> ContractInstance:
        """Like get_contract, but an address set in the environment variable takes precedence."""
        address = os.environ.get(envvar)
        if address:
            return get_contract_container(contract_name).at(to_checksum_address(address))
        return self.get_contract(contract_name)
