# MIT License
# Copyright (c) 2025 Hashborn

"""
Observability Module

Client-side metrics for signing, resource selection and transfers.
"""

from .metrics import metrics_registry, export_metrics

__all__ = ['metrics_registry', 'export_metrics']
