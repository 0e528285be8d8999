"""
Measurement Aggregation
=======================

Comparison and summary statistics over measurement sequences.

- compare_measurements / sort_measurements: ordering by value
- average_measurement: mean of all values, regardless of unit
- average_by_unit: per-unit total, count and mean for the aggregated units
- value_range / summarize: min, max and where the average sits between them

Values are coerced with float() before aggregation, so numeric strings
coming from form input are accepted. Units are never converted; comparing
or averaging mixed units is the caller's responsibility.

Empty input never produces NaN: averages fall back to `empty` (0.0 by
default).
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Any
from dataclasses import dataclass
from functools import cmp_to_key
import numpy as np
import logging

logger = logging.getLogger(__name__)

DEFAULT_PRECISION = 2
DEFAULT_UNITS = ("kg", "m")
LB_PER_KG = 2.2


@dataclass
class UnitAverage:
    """Accumulated values for one unit."""
    unit: str
    total: float
    count: int
    mean: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unit": self.unit,
            "total": self.total,
            "count": self.count,
            "mean": self.mean,
        }


@dataclass
class MeasurementSummary:
    """
    Display summary of a measurement sequence.

    Attributes:
        count: Number of measurements
        average: Rounded mean value
        minimum: Smallest value (None when empty)
        maximum: Largest value (None when empty)
        average_ratio: Position of the average between min and max, 0-100
    """
    count: int
    average: float
    minimum: Optional[float]
    maximum: Optional[float]
    average_ratio: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "average": self.average,
            "minimum": self.minimum,
            "maximum": self.maximum,
            "average_ratio": self.average_ratio,
        }


def _values(measurements: Iterable) -> np.ndarray:
    return np.array([float(m.value) for m in measurements], dtype=float)


def compare_measurements(a, b) -> int:
    """
    Three-way comparison on value only.

    NaN values compare equal to each other and greater than any number,
    so they sort last.

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b
    """
    left, right = float(a.value), float(b.value)
    left_nan, right_nan = bool(np.isnan(left)), bool(np.isnan(right))
    if left_nan or right_nan:
        return int(left_nan) - int(right_nan)
    if left < right:
        return -1
    if left == right:
        return 0
    return 1


def sort_measurements(measurements: Iterable, reverse: bool = False) -> List:
    """Measurements sorted by value (stable for equal values)."""
    return sorted(measurements, key=cmp_to_key(compare_measurements), reverse=reverse)


def average_measurement(
    measurements: Sequence,
    precision: int = DEFAULT_PRECISION,
    empty: float = 0.0,
) -> float:
    """
    Mean of all values rounded to `precision` digits.

    Units are ignored. Returns `empty` for an empty sequence.
    """
    values = _values(measurements)
    if values.size == 0:
        return empty
    return round(float(np.mean(values)), precision)


def average_by_unit(
    measurements: Iterable,
    units: Sequence[str] = DEFAULT_UNITS,
    precision: int = DEFAULT_PRECISION,
    empty: float = 0.0,
) -> Dict[str, UnitAverage]:
    """
    Per-unit total, count and rounded mean.

    Only the units in `units` are accumulated; measurements in any other
    unit are skipped. Every requested unit appears in the result, with
    count 0 and mean `empty` when it has no measurements.

    Args:
        measurements: Measurements to aggregate
        units: Unit symbols to accumulate
        precision: Decimal digits of the mean
        empty: Mean reported for a unit without measurements

    Returns:
        Mapping of unit symbol -> UnitAverage
    """
    grouped: Dict[str, List[float]] = {unit: [] for unit in units}
    skipped = 0
    for m in measurements:
        symbol = str(m.unit)
        if symbol in grouped:
            grouped[symbol].append(float(m.value))
        else:
            skipped += 1

    if skipped:
        logger.debug(f"average_by_unit skipped {skipped} measurements outside {tuple(units)}")

    result = {}
    for unit, values in grouped.items():
        arr = np.array(values, dtype=float)
        total = float(np.sum(arr))
        mean = round(float(np.mean(arr)), precision) if arr.size else empty
        result[unit] = UnitAverage(unit=unit, total=total, count=int(arr.size), mean=mean)
    return result


def value_range(measurements: Iterable) -> Optional[Tuple[float, float]]:
    """(min, max) of the values, or None for an empty sequence."""
    values = _values(measurements)
    if values.size == 0:
        return None
    return float(np.min(values)), float(np.max(values))


def average_ratio(average: float, minimum: float, maximum: float) -> float:
    """
    Position of `average` on a 0-100 scale spanning [minimum, maximum].

    A zero span yields 0.0.
    """
    span = maximum - minimum
    if span == 0:
        return 0.0
    return (average - minimum) * 100 / span


def summarize(
    measurements: Sequence,
    precision: int = DEFAULT_PRECISION,
    empty: float = 0.0,
) -> MeasurementSummary:
    """Count, average, min, max and average ratio of a measurement sequence."""
    measurements = list(measurements)
    average = average_measurement(measurements, precision, empty)
    bounds = value_range(measurements)
    if bounds is None:
        return MeasurementSummary(
            count=0, average=average, minimum=None, maximum=None, average_ratio=0.0
        )

    minimum, maximum = bounds
    return MeasurementSummary(
        count=len(measurements),
        average=average,
        minimum=minimum,
        maximum=maximum,
        average_ratio=average_ratio(average, minimum, maximum),
    )


def kg_to_lb(kg: float) -> float:
    return kg * LB_PER_KG


def lb_to_kg(lb: float) -> float:
    return lb / LB_PER_KG
