# MIT License
# Copyright (c) 2025 Hashborn

"""
fuelwallet

Identity, authorization and resource accounting for Fuel accounts:
addresses, message signing and recovery, locked/unlocked accounts,
predicate accounts and coin selection.
"""

from .protocol.config.params import BASE_ASSET_ID, ZERO_BYTES32
from .protocol.crypto.addresses import Address, addressify
from .protocol.crypto.signer import Signer, hash_message
from .protocol.types.coin import AssetBalance, Coin, SpendQuery
from .wallet.account import Account
from .wallet.predicate import PredicateAccount

__all__ = [
    'BASE_ASSET_ID', 'ZERO_BYTES32',
    'Address', 'addressify',
    'Signer', 'hash_message',
    'AssetBalance', 'Coin', 'SpendQuery',
    'Account', 'PredicateAccount',
]
