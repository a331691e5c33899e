"""
Built-in statistics collectors.

Import collectors here to automatically register them; registry order is the
order collectors run in.
"""

from gedcom_enrich.statistics.collectors.structure import StructureCollector
from gedcom_enrich.statistics.collectors.temporal import TemporalCollector
from gedcom_enrich.statistics.collectors.geographic import GeographicCollector
from gedcom_enrich.statistics.collectors.demographics import DemographicsCollector

__all__ = [
    'StructureCollector',
    'TemporalCollector',
    'GeographicCollector',
    'DemographicsCollector',
]
