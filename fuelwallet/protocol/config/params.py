# MIT License
# Copyright (c) 2025 Hashborn

import os
from typing import Dict

# Global Constants
ZERO_BYTES32 = "0x" + "00" * 32
BASE_ASSET_ID = ZERO_BYTES32  # Native asset, used when no asset is given

BECH32_PREFIX = "fuel"
ADDRESS_LENGTH = 32
PUBLIC_KEY_LENGTH = 64
SIGNATURE_LENGTH = 64

# Message hashing domain tag
MESSAGE_PREFIX = b"\x19Fuel Signed Message:\n"

# Predicate root parameters
CONTRACT_ID_SEED = b"FUEL"
PREDICATE_CHUNK_SIZE = 16 * 1024
PREDICATE_WORD_SIZE = 8

class NetworkConfig:
    def __init__(self,
                 network_id: str,
                 provider_url: str,
                 chain_id: int,
                 bech32_prefix: str = BECH32_PREFIX,
                 base_asset_id: str = BASE_ASSET_ID):
        self.network_id = network_id
        self.provider_url = provider_url
        self.chain_id = chain_id
        self.bech32_prefix = bech32_prefix
        self.base_asset_id = base_asset_id

    def __repr__(self) -> str:
        return f"NetworkConfig({self.network_id!r}, url={self.provider_url!r}, chain_id={self.chain_id})"

NETWORKS: Dict[str, NetworkConfig] = {
    "local": NetworkConfig(
        network_id="local",
        provider_url="http://127.0.0.1:4000/graphql",
        chain_id=0,
    ),
    "beta-5": NetworkConfig(
        network_id="beta-5",
        provider_url="https://beta-5.fuel.network/graphql",
        chain_id=0,
    ),
}

def get_network(name: str = None) -> NetworkConfig:
    """Returns the network selected by name or by FUEL_NETWORK (default: local)."""
    name = name or os.environ.get("FUEL_NETWORK", "local")
    if name not in NETWORKS:
        raise KeyError(f"Unknown network '{name}'. Known: {', '.join(sorted(NETWORKS))}")
    config = NETWORKS[name]
    url = os.environ.get("FUEL_PROVIDER_URL")
    if url:
        return NetworkConfig(
            network_id=config.network_id,
            provider_url=url,
            chain_id=config.chain_id,
            bech32_prefix=config.bech32_prefix,
            base_asset_id=config.base_asset_id,
        )
    return config
