# MIT License
# Copyright (c) 2025 Hashborn

"""
Prometheus Metrics

Counters kept by the wallet core. They live on a dedicated registry so an
embedding application decides whether and where to expose them.

Metrics:
- Signatures produced, recoveries attempted
- Resource selections by outcome, coins selected
- Transfers submitted by account kind
"""

from prometheus_client import Counter, Histogram, CollectorRegistry, generate_latest

# Create registry for metrics
metrics_registry = CollectorRegistry()

# ═══════════════════════════════════════════════════════════════════
# SIGNER METRICS
# ═══════════════════════════════════════════════════════════════════

signatures_total = Counter(
    'fuelwallet_signatures_total',
    'Total number of signatures produced',
    registry=metrics_registry
)

recoveries_total = Counter(
    'fuelwallet_recoveries_total',
    'Total number of public key recoveries',
    ['result'],  # 'ok', 'invalid'
    registry=metrics_registry
)

# ═══════════════════════════════════════════════════════════════════
# RESOURCE METRICS
# ═══════════════════════════════════════════════════════════════════

resource_selections_total = Counter(
    'fuelwallet_resource_selections_total',
    'Resource selections per asset by outcome',
    ['outcome'],  # 'selected', 'insufficient'
    registry=metrics_registry
)

coins_per_selection = Histogram(
    'fuelwallet_coins_per_selection',
    'Number of coins chosen for one asset',
    buckets=[0, 1, 2, 4, 8, 16, 32, 64, 255],
    registry=metrics_registry
)

# ═══════════════════════════════════════════════════════════════════
# TRANSFER METRICS
# ═══════════════════════════════════════════════════════════════════

transfers_total = Counter(
    'fuelwallet_transfers_total',
    'Transfers handed to the transaction sender',
    ['kind'],  # 'account', 'predicate'
    registry=metrics_registry
)


def export_metrics() -> bytes:
    """Returns all metrics in Prometheus text exposition format."""
    return generate_latest(metrics_registry)
