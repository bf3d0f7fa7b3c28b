import json
import time
from pathlib import Path
from typing import Dict

import yaml
from ape import chain, project
from ape.contracts import ContractContainer
from ape.utils import EMPTY_BYTES32
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from dpay_deployment.constants import (
    ADDRESS_BOOK_FILENAME,
    ARTIFACTS_DIR,
    CONSTRUCTOR_PARAMS_DIR,
    EIP1967_IMPLEMENTATION_SLOT,
    OZ_DEPENDENCY_NAME,
    OZ_DEPENDENCY_VERSION,
    REWARDS_PARAMS_FILENAME,
)
from dpay_deployment.networks import get_chain_id, get_network_name, is_local_network


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def delay(milliseconds: int) -> None:
    """Blocks for the given number of milliseconds."""
    if milliseconds > 0:
        time.sleep(milliseconds / 1000)


def get_artifact_filepath(config: Dict) -> Path:
    """Returns the filepath of the address book used by a params file."""
    artifact_config = config.get("artifacts") or {}
    artifact_dir = Path(artifact_config.get("dir", ARTIFACTS_DIR))
    filename = artifact_config.get("filename", ADDRESS_BOOK_FILENAME)
    return artifact_dir / filename


def validate_config(config: Dict) -> Path:
    """
    Checks that the params file is complete and that it targets
    the network the active provider is connected to.
    """
    print("Validating parameters YAML...")

    deployment = config.get("deployment")
    if not deployment:
        raise ValueError("deployment is not set in params file.")

    config_chain_id = deployment.get("chain_id")
    if not config_chain_id:
        raise ValueError("chain_id is not set in params file.")

    contracts = config.get("contracts")
    if not contracts:
        raise ValueError("Constructor parameters file missing 'contracts' field.")

    config_chain_id = int(config_chain_id)
    chain_mismatch = config_chain_id != get_chain_id()
    if chain_mismatch and not is_local_network():
        raise ValueError(
            f"chain_id in params file ({config_chain_id}) does not match "
            f"chain_id of current network ({get_chain_id()})."
        )

    return get_artifact_filepath(config=config)


def params_filepath_from_network(
    network_name: str = None, filename: str = REWARDS_PARAMS_FILENAME
) -> Path:
    network_name = network_name or get_network_name()
    p = CONSTRUCTOR_PARAMS_DIR / network_name / filename
    if not p.exists():
        raise ValueError(f"No params file '{filename}' found for network '{network_name}'")

    return p


def get_oz_dependency():
    """Returns the OpenZeppelin contracts dependency declared in ape-config.yaml."""
    return project.dependencies[OZ_DEPENDENCY_NAME][OZ_DEPENDENCY_VERSION]


def _get_dependency_contract_container(contract: str) -> ContractContainer:
    for dependency_name, dependency_versions in project.dependencies.items():
        if len(dependency_versions) > 1:
            raise ValueError(f"Ambiguous {dependency_name} dependency for {contract}")
        try:
            dependency_api = list(dependency_versions.values())[0]
            contract_container = getattr(dependency_api, contract)
            return contract_container
        except AttributeError:
            continue
    raise ValueError(f"No contract found with name '{contract}'.")


def get_contract_container(contract: str) -> ContractContainer:
    try:
        contract_container = getattr(project, contract)
    except AttributeError:
        # not in root project; check dependencies
        contract_container = _get_dependency_contract_container(contract)

    return contract_container


def get_implementation_address(proxy_address: ChecksumAddress) -> ChecksumAddress:
    """Reads the logic contract address of an EIP1967 proxy."""
    implementation_slot = chain.provider.get_storage(
        address=proxy_address, slot=EIP1967_IMPLEMENTATION_SLOT
    )
    if implementation_slot == EMPTY_BYTES32:
        raise ValueError(
            f"Implementation slot for contract at {proxy_address} is empty. "
            "Are you sure this is an EIP1967-compatible proxy?"
        )
    return to_checksum_address(implementation_slot[-20:])
