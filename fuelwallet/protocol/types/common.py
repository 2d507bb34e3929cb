# MIT License
# Copyright (c) 2025 Hashborn

from enum import Enum
from typing import Optional

class ErrorCode(str, Enum):
    INVALID_ENCODING = "INVALID_ENCODING"
    INVALID_LENGTH = "INVALID_LENGTH"
    UNRESOLVABLE_ADDRESS = "UNRESOLVABLE_ADDRESS"
    INVALID_KEY = "INVALID_KEY"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    NO_SIGNING_KEY = "NO_SIGNING_KEY"
    NO_PROVIDER_CONFIGURED = "NO_PROVIDER_CONFIGURED"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    INVALID_PREDICATE_DATA = "INVALID_PREDICATE_DATA"
    TRANSACTION_FAILED = "TRANSACTION_FAILED"

class FuelError(Exception):
    """Base class for all local validation failures of the wallet core."""
    code: ErrorCode = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

class AddressError(FuelError):
    pass

class InvalidEncoding(AddressError):
    code = ErrorCode.INVALID_ENCODING

class InvalidLength(AddressError):
    code = ErrorCode.INVALID_LENGTH

class UnresolvableAddress(AddressError):
    code = ErrorCode.UNRESOLVABLE_ADDRESS

class InvalidKey(FuelError):
    code = ErrorCode.INVALID_KEY

class InvalidSignature(FuelError):
    code = ErrorCode.INVALID_SIGNATURE

class NoSigningKey(FuelError):
    code = ErrorCode.NO_SIGNING_KEY

class NoProviderConfigured(FuelError):
    code = ErrorCode.NO_PROVIDER_CONFIGURED

    def __init__(self, message: str = "Provider not set"):
        super().__init__(message)

class InsufficientFunds(FuelError):
    code = ErrorCode.INSUFFICIENT_FUNDS

    def __init__(self, asset_id: str, required: int, available: int):
        super().__init__(
            f"Not enough coins to fit the target: asset {asset_id} "
            f"requires {required}, available {available}"
        )
        self.asset_id = asset_id
        self.required = required
        self.available = available

class InvalidPredicateData(FuelError):
    code = ErrorCode.INVALID_PREDICATE_DATA

class TransactionFailed(FuelError):
    code = ErrorCode.TRANSACTION_FAILED

    def __init__(self, tx_id: str, reason: Optional[str] = None):
        super().__init__(f"Transaction {tx_id} failed: {reason or 'unknown reason'}")
        self.tx_id = tx_id
        self.reason = reason
