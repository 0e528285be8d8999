"""
DukeLabs Experiment Tracker
===========================

In-memory model for scientific experiments and their measurements.

Core Components:
- Duration Codec: ISO-8601 style "PT1H2M3S" text <-> milliseconds
- Models: Measurement, Experiment (with the thought-experiment variant)
- Experiment Store: Dual-indexed registry of experiments and measurements
- Aggregation: Comparison, averages, min/max and display summaries
- Experiment Tracker: Plain operations for UI glue code

License: MIT
"""

__version__ = "1.0.0"

from .core.errors import (
    DukeLabsError,
    FormatError,
    NotFoundError,
    DuplicateKeyError,
    InvalidOperationError,
)
from .core.duration import parse_duration, format_duration
from .core.models import Measurement, Experiment, ExperimentKind, SIUnit, ONGOING
from .core.factory import (
    IdAllocator,
    MeasurementFactory,
    create_ongoing_experiment,
    create_complete_experiment,
    create_thought_experiment,
)
from .storage.store import ExperimentStore, default_seed
from .analysis.aggregation import (
    compare_measurements,
    sort_measurements,
    average_measurement,
    average_by_unit,
    summarize,
)
from .tracker import ExperimentTracker, TrackerConfig

__all__ = [
    "DukeLabsError",
    "FormatError",
    "NotFoundError",
    "DuplicateKeyError",
    "InvalidOperationError",
    "parse_duration",
    "format_duration",
    "Measurement",
    "Experiment",
    "ExperimentKind",
    "SIUnit",
    "ONGOING",
    "IdAllocator",
    "MeasurementFactory",
    "create_ongoing_experiment",
    "create_complete_experiment",
    "create_thought_experiment",
    "ExperimentStore",
    "default_seed",
    "compare_measurements",
    "sort_measurements",
    "average_measurement",
    "average_by_unit",
    "summarize",
    "ExperimentTracker",
    "TrackerConfig",
]
