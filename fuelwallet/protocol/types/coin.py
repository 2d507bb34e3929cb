# MIT License
# Copyright (c) 2025 Hashborn

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, Iterable, List, Optional

from ..config.params import BASE_ASSET_ID
from ..crypto.addresses import Address, _bytes_from_hex
from .common import AddressError


def normalize_asset_id(value: Any) -> str:
    """Returns the canonical 0x-prefixed lowercase form of a 32-byte asset id."""
    if isinstance(value, (bytes, bytearray)):
        return Address(bytes(value)).to_hex_string()
    if not isinstance(value, str):
        raise ValueError(f"Asset id must be a hex string, got {type(value).__name__}")
    try:
        return "0x" + _bytes_from_hex(value).hex()
    except AddressError as e:
        raise ValueError(f"Invalid asset id {value!r}: {e.message}") from e


def _coerce_address(value: Any) -> Any:
    try:
        if isinstance(value, str):
            return Address.from_string(value)
        if isinstance(value, (bytes, bytearray)):
            return Address(bytes(value))
    except AddressError as e:
        raise ValueError(e.message) from e
    return value


class Coin(BaseModel):
    """An unspent value record of one asset owned by one address."""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    id: str
    owner: Address
    asset_id: str
    amount: int = Field(ge=0)
    block_created: int = 0  # Ledger metadata, not interpreted here

    @field_validator("owner", mode="before")
    @classmethod
    def check_owner(cls, v: Any) -> Any:
        return _coerce_address(v)

    @field_validator("asset_id", mode="before")
    @classmethod
    def check_asset_id(cls, v: Any) -> str:
        return normalize_asset_id(v)


class AssetBalance(BaseModel):
    model_config = ConfigDict(frozen=True)

    asset_id: str
    amount: int = Field(ge=0)

    @field_validator("asset_id", mode="before")
    @classmethod
    def check_asset_id(cls, v: Any) -> str:
        return normalize_asset_id(v)


class SpendQuery(BaseModel):
    """Minimum amount wanted for one asset, optionally bounded by a ceiling."""
    model_config = ConfigDict(frozen=True)

    asset_id: str = BASE_ASSET_ID
    amount: int = Field(ge=0)
    max: Optional[int] = Field(default=None, ge=0)

    @field_validator("asset_id", mode="before")
    @classmethod
    def check_asset_id(cls, v: Any) -> str:
        return normalize_asset_id(v)

    @model_validator(mode="after")
    def ceiling_covers_minimum(self) -> "SpendQuery":
        if self.max is not None and self.max < self.amount:
            raise ValueError(f"Ceiling {self.max} is below the required amount {self.amount}")
        return self


def merge_spend_queries(queries: Iterable[SpendQuery]) -> Dict[str, SpendQuery]:
    """
    Combines queries naming the same asset.

    Amounts are summed. Ceilings are summed when every query for the asset has
    one; a single unbounded query leaves the asset unbounded.
    """
    merged: Dict[str, SpendQuery] = {}
    for q in queries:
        prev = merged.get(q.asset_id)
        if prev is None:
            merged[q.asset_id] = q
            continue
        ceiling = None
        if prev.max is not None and q.max is not None:
            ceiling = prev.max + q.max
        merged[q.asset_id] = SpendQuery(asset_id=q.asset_id, amount=prev.amount + q.amount, max=ceiling)
    return merged


def coin_quantities(amount: int, asset_id: str = BASE_ASSET_ID, max: Optional[int] = None) -> List[SpendQuery]:
    return [SpendQuery(asset_id=asset_id, amount=amount, max=max)]
