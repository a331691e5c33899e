"""
Statistics module for population metrics.

Unlike the enrichment module which produces enriched individual records, the
statistics module collects aggregate metrics across the whole population.

Main components:
    - StatisticsCollector: Base class for creating custom statistics collectors
    - StatisticsPipeline: Orchestrates running multiple collectors
    - MetricsAggregator: Runs the pipeline and adds country resolution statistics
    - Built-in collectors: structure, temporal, geographic, demographics
"""

from gedcom_enrich.statistics.base import StatisticsCollector, register_collector, get_collector_registry
from gedcom_enrich.statistics.pipeline import StatisticsPipeline, StatisticsConfig
from gedcom_enrich.statistics.model import Stats, StatValue
from gedcom_enrich.statistics.aggregator import MetricsAggregator

# Import collectors to ensure they're registered
from gedcom_enrich.statistics import collectors

__all__ = [
    'StatisticsCollector',
    'register_collector',
    'get_collector_registry',
    'StatisticsPipeline',
    'StatisticsConfig',
    'MetricsAggregator',
    'Stats',
    'StatValue',
    'collectors',
]
