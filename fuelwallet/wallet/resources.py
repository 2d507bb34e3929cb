# MIT License
# Copyright (c) 2025 Hashborn

"""
Resource selection and balance aggregation.

Selection works on a snapshot: coins are listed once per asset and nothing is
reserved, so two concurrent selections for the same owner may pick the same
coin. The ledger rejects the second spend.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from ..protocol.crypto.addresses import Address
from ..protocol.types.coin import AssetBalance, Coin, SpendQuery, merge_spend_queries
from ..protocol.types.common import InsufficientFunds
from ..observability import metrics
from .provider import CoinQuery

logger = logging.getLogger(__name__)


def _largest_first(coins: Iterable[Coin]) -> List[Coin]:
    # Coin id breaks ties so equal amounts always come out in the same order
    return sorted(coins, key=lambda c: (-c.amount, c.id))


def select_coins(coins: Iterable[Coin], query: SpendQuery) -> List[Coin]:
    """
    Picks coins of one asset covering `query.amount`.

    Coins are taken largest first. A coin that would push the running total
    past `query.max` is deferred while smaller coins are tried. If the minimum
    is still not met, the smallest deferred coin is added; it always crosses
    the minimum because the ceiling is never below it.
    """
    if query.amount == 0:
        return []

    selected: List[Coin] = []
    deferred: List[Coin] = []
    total = 0
    candidates = [c for c in _largest_first(coins) if c.amount > 0]

    for coin in candidates:
        if query.max is not None and total + coin.amount > query.max:
            deferred.append(coin)
            continue
        selected.append(coin)
        total += coin.amount
        if total >= query.amount:
            return selected

    if deferred:
        # Deferred coins are in descending order; the last one overshoots least
        selected.append(deferred[-1])
        return selected

    raise InsufficientFunds(query.asset_id, query.amount, total)


def select_resources(
    query: CoinQuery,
    owner: Address,
    spend_queries: Iterable[SpendQuery],
    excluded_ids: Optional[Iterable[str]] = None,
) -> List[Coin]:
    """
    Selects coins owned by `owner` satisfying every spend query.

    Assets are processed in ascending asset id order; within an asset the
    coins keep the order they were selected in.
    """
    merged = merge_spend_queries(spend_queries)
    excluded: Set[str] = set(excluded_ids or ())
    result: List[Coin] = []

    for asset_id in sorted(merged):
        spend = merged[asset_id]
        coins = [
            c for c in query.list_coins(owner, asset_id)
            if c.id not in excluded and c.asset_id == asset_id and c.owner == owner
        ]
        try:
            chosen = select_coins(coins, spend)
        except InsufficientFunds:
            metrics.resource_selections_total.labels(outcome="insufficient").inc()
            logger.debug(f"Insufficient {asset_id} for {owner}: need {spend.amount}, have {sum(c.amount for c in coins)}")
            raise
        metrics.resource_selections_total.labels(outcome="selected").inc()
        metrics.coins_per_selection.observe(len(chosen))
        logger.debug(f"Selected {len(chosen)}/{len(coins)} coins of {asset_id} for {owner}")
        result.extend(chosen)

    return result


def normalize_balances(balances: Iterable[AssetBalance]) -> List[AssetBalance]:
    """Merges entries per asset, drops zero totals and sorts by asset id."""
    totals: Dict[str, int] = {}
    for b in balances:
        totals[b.asset_id] = totals.get(b.asset_id, 0) + b.amount
    return [
        AssetBalance(asset_id=asset_id, amount=amount)
        for asset_id, amount in sorted(totals.items())
        if amount > 0
    ]


def aggregate_balances(coins: Iterable[Coin]) -> List[AssetBalance]:
    """Sums coin amounts per asset."""
    return normalize_balances(AssetBalance(asset_id=c.asset_id, amount=c.amount) for c in coins)


def get_balances(query: CoinQuery, owner: Address) -> List[AssetBalance]:
    return aggregate_balances(query.list_coins(owner, None))
