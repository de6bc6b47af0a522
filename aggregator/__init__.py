"""
Aggregator Module
"""
from .data_aggregator import DataAggregator, aggregate_sources

__all__ = [
    "DataAggregator",
    "aggregate_sources",
]
