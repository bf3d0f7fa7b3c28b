from ape import networks

from dpay_deployment.constants import LOCAL


def get_network_name() -> str:
    """Returns the name of the network the active provider is connected to."""
    return networks.provider.network.name


def get_chain_id() -> int:
    return networks.provider.network.chain_id


def is_local_network() -> bool:
    return get_network_name() == LOCAL
