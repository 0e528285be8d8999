"""
Core components for DukeLabs.
"""

from .errors import DukeLabsError, FormatError, NotFoundError, DuplicateKeyError, InvalidOperationError
from .duration import parse_duration, format_duration
from .models import Measurement, Experiment, ExperimentKind, SIUnit, ONGOING
from .factory import IdAllocator, MeasurementFactory

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
]
