# MIT License
# Copyright (c) 2025 Hashborn

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional

from ..config.params import BASE_ASSET_ID
from ..crypto.addresses import Address
from .coin import Coin, normalize_asset_id


class TxParams(BaseModel):
    """Caller supplied fee settings, passed through to the transaction sender."""
    gas_price: int = Field(default=1, ge=0)
    gas_limit: int = Field(default=1_000_000, ge=0)
    maturity: int = Field(default=0, ge=0)


class PredicateData(BaseModel):
    """Everything the ledger needs to evaluate a predicate input."""
    model_config = ConfigDict(frozen=True)

    bytecode: bytes
    input_data: List[Any] = Field(default_factory=list)
    abi: Optional[Dict[str, Any]] = None


class TransferRequest(BaseModel):
    """
    A single-asset transfer ready for assembly.

    Inputs are spent in full; whatever exceeds `amount` returns to `change_to`.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    inputs: List[Coin]
    destination: Address
    amount: int = Field(gt=0)
    asset_id: str = BASE_ASSET_ID
    change_to: Address
    params: TxParams = Field(default_factory=TxParams)
    predicate: Optional[PredicateData] = None

    @field_validator("asset_id", mode="before")
    @classmethod
    def check_asset_id(cls, v: Any) -> str:
        return normalize_asset_id(v)

    @property
    def input_total(self) -> int:
        return sum(c.amount for c in self.inputs if c.asset_id == self.asset_id)

    @property
    def change(self) -> int:
        return self.input_total - self.amount

    def signing_payload(self) -> Dict[str, Any]:
        """Canonical, JSON-compatible view used to derive the transaction id."""
        return {
            "inputs": [[c.id, c.owner.to_hex_string(), c.asset_id, str(c.amount)] for c in self.inputs],
            "destination": self.destination.to_hex_string(),
            "amount": str(self.amount),
            "asset_id": self.asset_id,
            "change_to": self.change_to.to_hex_string(),
            "gas_price": self.params.gas_price,
            "gas_limit": self.params.gas_limit,
            "maturity": self.params.maturity,
            "predicate": "0x" + self.predicate.bytecode.hex() if self.predicate else None,
        }
