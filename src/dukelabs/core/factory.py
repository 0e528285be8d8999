"""
Entity Factories
================

Creates Measurements and Experiments.

- IdAllocator: strictly increasing measurement ids, one per store
- MeasurementFactory: stamps ids and resolves SI units
- create_*_experiment: constructors for the three experiment shapes
  (ongoing, complete, thought)

Experiment constructors do not check id uniqueness; that is the store's job.
"""

from typing import Any, Optional
from datetime import datetime
import logging

from .models import Measurement, Experiment, ExperimentKind, SIUnit

logger = logging.getLogger(__name__)


class IdAllocator:
    """
    Hands out strictly increasing integer ids.

    Ids are never reused for the lifetime of the allocator.
    """

    def __init__(self, start: int = 1):
        if start < 1:
            raise ValueError(f"Ids must be positive, got start={start}")
        self._next_id = start
        self.total_allocated = 0

    def allocate(self) -> int:
        """Return the next id."""
        allocated = self._next_id
        self._next_id += 1
        self.total_allocated += 1
        return allocated

    def peek(self) -> int:
        """The id the next call to allocate() will return."""
        return self._next_id

    def advance_past(self, used_id: int):
        """Make sure ids already in use (e.g. from seed data) are never handed out."""
        if used_id >= self._next_id:
            self._next_id = used_id + 1


class MeasurementFactory:
    """
    Factory for Measurement objects.

    Unknown unit symbols are not rejected: the measurement is created with
    SIUnit.NONE. Value and time are stored as given.
    """

    def __init__(self, allocator: Optional[IdAllocator] = None):
        """
        Initialize the factory.

        Args:
            allocator: Id source (a fresh allocator starting at 1 if None)
        """
        self.allocator = allocator or IdAllocator()
        self.total_created = 0
        self.unrecognized_units = 0

    def create(self, unit: Any, value: Any, time: str) -> Measurement:
        """
        Create a measurement with a fresh id.

        Args:
            unit: Unit symbol, e.g. "kg"
            value: Observed value
            time: Offset from the experiment start as duration text

        Returns:
            The new Measurement
        """
        resolved = SIUnit.from_symbol(unit)
        if not resolved.recognized:
            self.unrecognized_units += 1
            logger.debug(f"Unrecognized unit {unit!r}, storing {resolved}")

        measurement = Measurement(
            measurement_id=self.allocator.allocate(),
            unit=resolved,
            value=value,
            time=time,
        )
        self.total_created += 1

        logger.debug(f"Created measurement {measurement.measurement_id} ({resolved})")
        return measurement


def create_ongoing_experiment(
    experiment_id: int,
    task: str,
    budget: float,
    start_time: datetime,
) -> Experiment:
    """Create an experiment that has not finished yet."""
    return Experiment(
        experiment_id=experiment_id,
        task=task,
        budget=budget,
        start_time=start_time,
    )


def create_complete_experiment(
    experiment_id: int,
    task: str,
    budget: float,
    start_time: datetime,
    end_time: datetime,
) -> Experiment:
    """Create an experiment that already finished at `end_time`."""
    return Experiment(
        experiment_id=experiment_id,
        task=task,
        budget=budget,
        start_time=start_time,
        _end_time=end_time,
        _complete=True,
    )


def create_thought_experiment(
    experiment_id: int,
    task: str,
    thought: str,
    start_time: datetime,
    end_time: Optional[datetime] = None,
) -> Experiment:
    """
    Create a thought experiment seeded with its first note.

    The budget is always zero. Passing `end_time` creates it complete.
    """
    return Experiment(
        experiment_id=experiment_id,
        task=task,
        budget=0,
        start_time=start_time,
        kind=ExperimentKind.THOUGHT,
        _end_time=end_time,
        _complete=end_time is not None,
        _thoughts=[thought],
    )
