import json
import os
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from dpay_deployment.constants import ADDRESS_BOOK_FILENAME, ARTIFACTS_DIR
from dpay_deployment.utils import _load_json

NetworkName = str
ContractName = str

STANDARD_ADDRESS_BOOK_JSON_FORMAT = {"indent": 4, "separators": (",", ": "), "sort_keys": True}


class AddressRecord(NamedTuple):
    """Represents a single deployed contract in the address book."""

    network: NetworkName
    name: ContractName
    address: ChecksumAddress


class Database:
    """
    JSON address book of deployed contracts: {network: {contract name: address}}.

    There is at most one address per (network, contract name); the last write wins.
    Records are never deleted.
    """

    def __init__(self, filepath: Optional[Path] = None):
        self.filepath = Path(filepath or ARTIFACTS_DIR / ADDRESS_BOOK_FILENAME)

    def _load(self) -> Dict[NetworkName, Dict[ContractName, ChecksumAddress]]:
        if not self.filepath.exists() or not self.filepath.stat().st_size:
            return dict()
        return _load_json(self.filepath)

    def _dump(self, data: Dict[NetworkName, Dict[ContractName, ChecksumAddress]]) -> None:
        self.filepath.parent.mkdir(parents=True, exist_ok=True)

        # the address book is only ever replaced whole
        temp_filepath = self.filepath.with_suffix(".temp.json")
        with open(temp_filepath, "w") as file:
            json.dump(data, file, **STANDARD_ADDRESS_BOOK_JSON_FORMAT)
            file.flush()
            os.fsync(file.fileno())
        temp_filepath.replace(self.filepath)

    def read(self, network: NetworkName, name: ContractName) -> Optional[ChecksumAddress]:
        """Returns the recorded address of a contract, or None if it was never written."""
        return self._load().get(network, dict()).get(name)

    def write(self, network: NetworkName, name: ContractName, address: str) -> ChecksumAddress:
        address = to_checksum_address(address)
        data = self._load()
        data.setdefault(network, dict())[name] = address
        self._dump(data)
        return address

    def records(self, network: Optional[NetworkName] = None) -> List[AddressRecord]:
        """Returns the address book entries sorted by network then name, optionally filtered."""
        records = list()
        for network_name, contracts in sorted(self._load().items()):
            if network and network != network_name:
                continue
            for name, address in sorted(contracts.items()):
                records.append(AddressRecord(network=network_name, name=name, address=address))
        return records
