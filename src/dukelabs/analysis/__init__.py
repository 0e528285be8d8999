"""
Aggregation and comparison of measurements.
"""

from .aggregation import (
    UnitAverage,
    MeasurementSummary,
    compare_measurements,
    sort_measurements,
    average_measurement,
    average_by_unit,
    value_range,
    summarize,
)

__all__ = [
    "UnitAverage",
    "MeasurementSummary",
    "compare_measurements",
    "sort_measurements",
    "average_measurement",
    "average_by_unit",
    "value_range",
    "summarize",
]
