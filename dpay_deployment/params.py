import json
import typing
from abc import ABC, abstractmethod
from collections import OrderedDict
from pathlib import Path
from typing import Any, List, Optional

from ape.api import AccountAPI, ReceiptAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractContainer, ContractInstance, ContractTransactionHandler
from ape.utils import ZERO_ADDRESS
from eth_typing import ChecksumAddress
from ethpm_types import MethodABI
from web3 import Web3

from dpay_deployment.confirm import _confirm_resolution, _continue
from dpay_deployment.db import Database
from dpay_deployment.networks import get_chain_id, get_network_name
from dpay_deployment.utils import (
    _load_yaml,
    delay,
    get_contract_container,
    validate_config,
)
from dpay_deployment.web3_utils import Web3Utils

CONTRACT_CONSTRUCTOR_PARAMETER_KEY = "constructor"
CONTRACT_PROXY_PARAMETER_KEY = "proxy"

w3 = Web3()


class VariableContext:
    def __init__(
        self,
        contract_names: List[str],
        db: Database,
        constants: typing.Dict[str, Any] = None,
    ):
        self.contract_names = contract_names or list()
        self.db = db
        self.constants = constants or dict()


# Variables


class Variable(ABC):
    VARIABLE_PREFIX = "$"

    @abstractmethod
    def resolve(self) -> Any:
        raise NotImplementedError

    @classmethod
    def is_variable(cls, param: Any) -> bool:
        """Returns True if the param is a variable."""
        result = isinstance(param, str) and param.startswith(cls.VARIABLE_PREFIX)
        return result


class DeployerAccount(Variable):
    DEPLOYER_INDICATOR = "deployer"

    @classmethod
    def is_deployer(cls, value: str) -> bool:
        """Returns True if the variable is a special deployer variable."""
        return value == cls.DEPLOYER_INDICATOR

    def resolve(self) -> Any:
        deployer_account = Deployer.get_account()
        if deployer_account is None:
            return ZERO_ADDRESS
        return deployer_account.address


class Constant(Variable):
    def __init__(self, constant_name: str, context: VariableContext):
        try:
            self.constant_value = context.constants[constant_name]
        except KeyError:
            raise ValueError(f"Constant '{constant_name}' not found in deployment file.")

    @classmethod
    def is_constant(cls, value: str) -> bool:
        """Returns True if the variable is a deployment constant."""
        return value.isupper()

    def resolve(self) -> Any:
        return self.constant_value


class ContractName(Variable):
    def __init__(self, contract_name: str, context: VariableContext):
        if contract_name not in context.contract_names:
            raise ValueError(f"Contract name {contract_name} not found")

        self.contract_name = contract_name
        self.db = context.db

    def resolve(self) -> Any:
        """Resolves a contract address from the address book of the connected network."""
        address = self.db.read(get_network_name(), self.contract_name)
        if not address:
            # not deployed yet - eager validation
            return ZERO_ADDRESS
        return address


def _resolve_param(value: Any) -> Any:
    """Resolves a single parameter value or a list of parameter values."""
    if isinstance(value, list):
        return [_resolve_param(v) for v in value]

    if isinstance(value, Variable):
        return value.resolve()

    return value  # literally a value


def _resolve_params(parameters: OrderedDict) -> OrderedDict:
    resolved_parameters = OrderedDict()
    for name, value in parameters.items():
        resolved_parameters[name] = _resolve_param(value)

    return resolved_parameters


def _variable_from_value(variable: Any, context: VariableContext) -> Variable:
    variable = variable.strip(Variable.VARIABLE_PREFIX)
    if DeployerAccount.is_deployer(variable):
        return DeployerAccount()
    elif Constant.is_constant(variable):
        return Constant(variable, context)
    else:
        return ContractName(variable, context)


def _process_raw_value(value: Any, variable_context: VariableContext) -> Any:
    if isinstance(value, list):
        return [_process_raw_value(v, variable_context) for v in value]

    if Variable.is_variable(value):
        value = _variable_from_value(value, variable_context)

    return value


def _process_raw_values(values: OrderedDict, variable_context: VariableContext) -> OrderedDict:
    processed_parameters = OrderedDict()
    for name, value in values.items():
        processed_parameters[name] = _process_raw_value(value, variable_context)

    return processed_parameters


def _get_contract_names(config: typing.Dict) -> List[str]:
    contract_names = list()
    for contract_info in config["contracts"]:
        if isinstance(contract_info, str):
            contract_names.append(contract_info)
        elif isinstance(contract_info, dict):
            contract_names.extend(list(contract_info.keys()))
        else:
            raise ValueError("Malformed constructor parameters YAML.")

    return contract_names


def _get_contract_entries(config: typing.Dict) -> typing.Iterator[typing.Tuple[str, dict]]:
    """Yields (contract name, contract data) for every contract listed in a params file."""
    for contract_info in config["contracts"]:
        if isinstance(contract_info, str):
            yield contract_info, dict()
        elif isinstance(contract_info, dict) and len(contract_info) == 1:
            contract_name = list(contract_info.keys())[0]  # only one entry
            yield contract_name, contract_info[contract_name] or dict()
        else:
            raise ValueError("Malformed constructor parameters YAML.")


def _validate_method_args(
    method_abis: List[MethodABI], args: typing.Sequence[Any]
) -> typing.Dict[str, Any]:
    """Validates the transaction arguments against the function ABI."""
    if len(method_abis) == 0:
        raise ValueError("No method abis provided for validation of args")

    abis_matching_args_length = [abi for abi in method_abis if len(abi.inputs) == len(args)]
    for abi in abis_matching_args_length:
        named_args = {}
        for arg, abi_input in zip(args, abi.inputs):
            if not w3.is_encodable(abi_input.type, arg):
                break
            named_args[abi_input.name] = arg
        else:
            return named_args
    raise ValueError(
        f"Could not find ABI for '{method_abis[0].name}' with {len(args)} arg(s) and given type(s)"
    )


def _validate_constructor_abi_inputs(
    contract_name: str,
    abi_inputs: List[Any],
    resolved_parameters: OrderedDict,
) -> None:
    """
    Validates the constructor parameters against the constructor ABI.
    Parameters are positional; their names in the params file are labels only.
    """
    if len(resolved_parameters) != len(abi_inputs):
        raise ConstructorParameters.Invalid(
            f"Constructor parameters length mismatch - "
            f"{contract_name} ABI requires {len(abi_inputs)}, Got {len(resolved_parameters)}."
        )
    if not abi_inputs:
        return  # no constructor parameters

    codex = enumerate(zip(abi_inputs, resolved_parameters.items()), start=0)
    for position, (abi_input, resolved_input) in codex:
        name, value = resolved_input
        if not w3.is_encodable(abi_input.type, value):
            raise ConstructorParameters.Invalid(
                f"Constructor param name '{name}' at position {position} has a value '{value}' "
                f"whose type does not match expected ABI type '{abi_input.type}'"
            )


def validate_constructor_parameters(contracts_parameters) -> None:
    """Validates the constructor parameters for all contracts in a single config."""
    for contract, parameters in contracts_parameters.items():
        if not isinstance(parameters, dict):
            # this can happen if the yml file is malformed
            raise ValueError(f"Malformed constructor parameter config for {contract}.")

        resolved_parameters = _resolve_params(parameters=parameters)
        contract_container = get_contract_container(contract)
        _validate_constructor_abi_inputs(
            contract_name=contract,
            abi_inputs=contract_container.constructor.abi.inputs,
            resolved_parameters=resolved_parameters,
        )


class ConstructorParameters:
    """Represents the constructor parameters for a set of contracts."""

    class Invalid(Exception):
        """Raised when the constructor parameters are invalid"""

    def __init__(self, parameters: OrderedDict):
        self.parameters = parameters
        validate_constructor_parameters(parameters)

    @classmethod
    def from_config(cls, config: typing.Dict, db: Database) -> "ConstructorParameters":
        """Loads the constructor parameters from a params file."""
        print("Processing contract constructor parameters...")
        contracts_config = OrderedDict()
        contract_names = _get_contract_names(config)
        constants = config.get("constants")
        for contract_name, contract_data in _get_contract_entries(config):
            if CONTRACT_PROXY_PARAMETER_KEY in contract_data:
                # proxied contracts are initialized, not constructed
                continue
            parameter_values = OrderedDict()
            if CONTRACT_CONSTRUCTOR_PARAMETER_KEY in contract_data:
                parameter_values = _process_raw_values(
                    contract_data[CONTRACT_CONSTRUCTOR_PARAMETER_KEY] or dict(),
                    VariableContext(
                        contract_names=contract_names,
                        db=db,
                        constants=constants,
                    ),
                )
            contracts_config[contract_name] = parameter_values

        return cls(parameters=contracts_config)

    def resolve(self, contract_name: str) -> OrderedDict:
        """Resolves the constructor parameters for a single contract."""
        try:
            parameters = self.parameters[contract_name]
        except KeyError:
            raise ValueError(f"No constructor parameters for {contract_name} in params file")
        return _resolve_params(parameters)


def validate_proxy_info(contracts_proxy_info) -> None:
    """Validates the initializer of every proxied contract against its ABI."""
    for contract, proxy_info in contracts_proxy_info.items():
        contract_container = get_contract_container(contract)
        method_abis = [
            abi
            for abi in contract_container.contract_type.methods
            if abi.name == proxy_info.initializer
        ]
        if not method_abis:
            raise ProxyParameters.Invalid(
                f"{contract} has no initializer named '{proxy_info.initializer}'"
            )
        resolved_arguments = _resolve_params(proxy_info.arguments)
        try:
            _validate_method_args(method_abis=method_abis, args=list(resolved_arguments.values()))
        except ValueError as e:
            raise ProxyParameters.Invalid(str(e)) from e


class ProxyParameters:
    """Represents the initializer parameters for contracts deployed behind a UUPS proxy"""

    INITIALIZER = "initializer"
    ARGUMENTS = "arguments"
    DEFAULT_INITIALIZER = "initialize"

    class Invalid(Exception):
        """Raised when the proxy parameters are invalid"""

    class ProxyInfo(typing.NamedTuple):
        initializer: str
        arguments: OrderedDict

    def __init__(self, contracts_proxy_info: OrderedDict):
        self.contracts_proxy_info = contracts_proxy_info
        validate_proxy_info(contracts_proxy_info)

    @classmethod
    def from_config(cls, config: typing.Dict, db: Database) -> "ProxyParameters":
        """Loads the proxy parameters from a params file."""
        print("Processing proxy parameters...")
        contract_names = _get_contract_names(config)
        constants = config.get("constants")

        contracts_proxy_info = OrderedDict()
        for contract_name, contract_data in _get_contract_entries(config):
            if CONTRACT_PROXY_PARAMETER_KEY not in contract_data:
                continue
            if CONTRACT_CONSTRUCTOR_PARAMETER_KEY in contract_data:
                raise cls.Invalid(
                    f"{contract_name} is proxied; use proxy arguments instead of constructor"
                )

            proxy_data = contract_data[CONTRACT_PROXY_PARAMETER_KEY] or dict()
            proxy_info = cls.ProxyInfo(
                initializer=proxy_data.get(cls.INITIALIZER, cls.DEFAULT_INITIALIZER),
                arguments=_process_raw_values(
                    proxy_data.get(cls.ARGUMENTS) or dict(),
                    VariableContext(
                        contract_names=contract_names,
                        db=db,
                        constants=constants,
                    ),
                ),
            )
            contracts_proxy_info.update({contract_name: proxy_info})

        return cls(contracts_proxy_info=contracts_proxy_info)

    def contract_needs_proxy(self, contract_name) -> bool:
        proxy_info = self.contracts_proxy_info.get(contract_name)
        return proxy_info is not None

    def resolve(self, contract_name: str) -> typing.Tuple[str, OrderedDict]:
        """
        Resolves the initializer name and arguments for a single contract.
        """
        proxy_info = self.contracts_proxy_info.get(contract_name)
        if not proxy_info:
            raise ValueError(f"Unexpected contract to proxy: {contract_name}")

        resolved_arguments = _resolve_params(parameters=proxy_info.arguments)
        return proxy_info.initializer, resolved_arguments


class Transactor:
    """
    Represents an ape account plus validated/annotated transaction execution.
    """

    def __init__(self, account: typing.Optional[AccountAPI] = None, autosign: bool = False):
        if account is None:
            self._account = select_account()
        else:
            self._account = account
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign
        self._account.set_autosign(autosign)

    def get_account(self) -> AccountAPI:
        """Returns the transactor account."""
        return self._account

    def transact(self, method: ContractTransactionHandler, *args) -> ReceiptAPI:
        named_args = _validate_method_args(method_abis=method.abis, args=args)
        base_message = (
            f"\nTransacting {method.contract.contract_type.name}"
            f"[{method.contract.address[:10]}].{method}"
        )
        if named_args:
            pretty_args = "\n\t".join(f"{k}={v}" for k, v in named_args.items())
            message = f"{base_message} with arguments:\n\t{pretty_args}"
        else:
            message = f"{base_message} with no arguments"
        print(message)
        if not self._autosign:
            _continue()

        result = method(*args, sender=self._account)
        return result

    def grant_role(
        self, contract: ContractInstance, role_name: str, grantee: ChecksumAddress
    ) -> Optional[ReceiptAPI]:
        """Grants an AccessControl role, unless the grantee already holds it."""
        contract_name = contract.contract_type.name
        role = getattr(contract, role_name)()
        if contract.hasRole(role, grantee):
            print(f"(i) {contract_name}: {role_name} already granted to {grantee}")
            return None

        receipt = self.transact(contract.grantRole, role, grantee)
        print(f"✓ {contract_name}: {role_name} granted to {grantee}")
        return receipt


class Deployer(Transactor):
    """
    Represents an ape account plus
    deployment parameters for a set of contracts, plus validated/annotated execution.
    Deployments go through the address book, see Web3Utils.
    """

    __DEPLOYER_ACCOUNT: AccountAPI = None

    def __init__(
        self,
        config: typing.Dict,
        path: Path,
        account: typing.Optional[AccountAPI] = None,
        autosign: bool = False,
        redeploy: typing.Optional[bool] = None,
        delay_step: typing.Optional[int] = None,
    ):
        super().__init__(account, autosign)

        self.path = path
        self.config = config
        self.registry_filepath = validate_config(config=self.config)
        self._set_account(self._account)

        settings = config.get("settings") or dict()
        self.web3_utils = Web3Utils(
            account=self._account,
            delay_step=settings.get("delay_step") if delay_step is None else delay_step,
            redeploy=settings.get("redeploy") if redeploy is None else redeploy,
            db=Database(self.registry_filepath),
        )

        self.constructor_parameters = ConstructorParameters.from_config(
            self.config, db=self.web3_utils.db
        )
        self.proxy_parameters = ProxyParameters.from_config(self.config, db=self.web3_utils.db)

        self._print_deployment_info()

        if not self._autosign:
            # Confirms the start of the deployment.
            _continue()

    @classmethod
    def from_yaml(cls, filepath: Path, *args, **kwargs) -> "Deployer":
        config = _load_yaml(filepath)
        return cls(config=config, path=filepath, *args, **kwargs)

    @classmethod
    def get_account(cls) -> AccountAPI:
        """Returns the deployer account."""
        return cls.__DEPLOYER_ACCOUNT

    @classmethod
    def _set_account(cls, deployer: AccountAPI) -> None:
        """Sets the deployer account."""
        cls.__DEPLOYER_ACCOUNT = deployer

    @property
    def redeploy(self) -> bool:
        return self.web3_utils.redeploy

    def deploy(self, container: ContractContainer) -> ContractInstance:
        contract_name = container.contract_type.name
        needs_confirmation = not self._autosign and not self.web3_utils.is_deployed(contract_name)

        if self.proxy_parameters.contract_needs_proxy(contract_name):
            initializer, resolved_arguments = self.proxy_parameters.resolve(contract_name)
            if needs_confirmation:
                _confirm_resolution(resolved_arguments, f"{contract_name} (UUPS proxy)")
            return self.web3_utils.deploy_proxy(
                contract_name, initializer=initializer, args=list(resolved_arguments.values())
            )

        resolved_params = self.constructor_parameters.resolve(contract_name)
        if needs_confirmation:
            _confirm_resolution(resolved_params, contract_name)
        return self.web3_utils.deploy_contract(contract_name, args=list(resolved_params.values()))

    def upgrade(
        self, container: ContractContainer, proxy_address: ChecksumAddress, data: bytes = b""
    ) -> ContractInstance:
        """Deploys a new implementation and points an existing UUPS proxy at it."""
        contract_name = container.contract_type.name
        print(f"Deploy {contract_name} implementation on {get_network_name()}...")
        delay(self.web3_utils.delay_step)
        implementation = self.get_account().deploy(container)
        return self.upgradeTo(container, implementation, proxy_address, data)

    def upgradeTo(
        self,
        container: ContractContainer,
        implementation: ContractInstance,
        proxy_address: ChecksumAddress,
        data: bytes = b"",
    ) -> ContractInstance:
        proxy = container.at(proxy_address)
        self.transact(proxy.upgradeToAndCall, implementation.address, data)
        return proxy

    def summary(self, deployments: List[ContractInstance]) -> typing.Dict[str, Any]:
        return {
            "network": get_network_name(),
            "chain_id": get_chain_id(),
            "deployer": self.get_account().address,
            "contracts": {
                instance.contract_type.name: instance.address for instance in deployments
            },
        }

    def finalize(
        self,
        deployments: List[ContractInstance],
        roles: Optional[typing.Dict[str, ChecksumAddress]] = None,
    ) -> Path:
        """
        Prints a summary of the deployments and writes it next to the address book.
        """
        info = self.summary(deployments)
        if roles:
            info["roles"] = roles

        print("\n=== Deployment Summary ===")
        for name, address in info["contracts"].items():
            print(f"{name}: {address}")
        print(f"Deployer Address: {info['deployer']}")
        print(f"(i) Address book at {self.registry_filepath}")

        deployment_name = self.config["deployment"].get("name", "deployment")
        output_filepath = self.registry_filepath.with_name(
            f"{deployment_name}-{info['network']}.json"
        )
        output_filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(output_filepath, "w") as file:
            json.dump(info, file, indent=4)
        print(f"(i) Deployment info written to {output_filepath}!")
        return output_filepath

    def _print_deployment_info(self):
        print(
            f"Account: {self.get_account().address}",
            f"Config: {self.path}",
            f"Registry: {self.registry_filepath}",
            f"Redeploy: {self.redeploy}",
            f"Network: {get_network_name()}",
            f"Chain ID: {get_chain_id()}",
            sep="\n",
        )
