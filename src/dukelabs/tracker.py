"""
Experiment Tracker
==================

Facade combining the store, the measurement factory and the aggregation
functions into the plain operations a UI layer calls:

- find an experiment and list its measurements
- create experiments (ongoing, complete, thought)
- add a measurement, stamped with the time elapsed since the start
- complete an experiment
- summarize and render measurements

The current time only enters through the injected clock.
"""

from typing import Callable, Dict, List, Optional, Any, Sequence, Union
from dataclasses import dataclass, field
from datetime import datetime, timedelta
import logging

from .core.models import Experiment, Measurement
from .core.factory import (
    IdAllocator,
    create_ongoing_experiment,
    create_complete_experiment,
    create_thought_experiment,
)
from .core.errors import NotFoundError, InvalidOperationError
from .core.formatting import format_experiment, format_measurement_table
from .storage.store import ExperimentStore
from .analysis.aggregation import (
    MeasurementSummary,
    UnitAverage,
    average_by_unit,
    sort_measurements,
    summarize,
)

logger = logging.getLogger(__name__)

ExperimentRef = Union[int, Experiment]


@dataclass
class TrackerConfig:
    """Configuration for the Experiment Tracker."""
    # Aggregation
    aggregation_units: Sequence[str] = field(default_factory=lambda: ("kg", "m"))
    precision: int = 2
    empty_average: float = 0.0

    # Measurement ids
    first_measurement_id: int = 1

    # Lifecycle
    allow_measurements_after_completion: bool = False


class ExperimentTracker:
    """
    Entry point for host applications (CLI, web UI, tests).

    Every operation takes experiment ids (or Experiment objects) and
    returns core objects; presentation stays with the caller.
    """

    def __init__(
        self,
        config: Optional[TrackerConfig] = None,
        store: Optional[ExperimentStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the tracker.

        Args:
            config: Tracker configuration (defaults if None)
            store: Backing store (a new empty store if None)
            clock: Returns the current time (datetime.now if None)
        """
        self.config = config or TrackerConfig()
        if store is None:
            store = ExperimentStore(IdAllocator(self.config.first_measurement_id))
        self.store = store
        self.clock = clock or datetime.now

        logger.info(
            f"ExperimentTracker initialized: units={tuple(self.config.aggregation_units)}, "
            f"precision={self.config.precision}"
        )

    # ------------------------------------------------------------------
    # Experiments
    # ------------------------------------------------------------------

    def find_experiment(self, experiment: ExperimentRef) -> Experiment:
        """
        Resolve an experiment id.

        Raises:
            NotFoundError: If the store has no such experiment
        """
        if isinstance(experiment, Experiment):
            experiment_id = experiment.experiment_id
        else:
            experiment_id = experiment
        found = self.store.get_experiment(experiment_id)
        if found is None:
            raise NotFoundError(experiment_id)
        return found

    def create_experiment(
        self,
        experiment_id: int,
        task: str,
        budget: float,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> Experiment:
        """
        Create and register an experiment.

        Passing `end_time` creates it complete, otherwise it is ongoing.
        The start time defaults to now.
        """
        start_time = start_time or self.clock()
        if end_time is None:
            experiment = create_ongoing_experiment(experiment_id, task, budget, start_time)
        else:
            experiment = create_complete_experiment(
                experiment_id, task, budget, start_time, end_time
            )
        self.store.add_experiment(experiment)
        return experiment

    def create_thought_experiment(
        self,
        experiment_id: int,
        task: str,
        thought: str,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
    ) -> Experiment:
        """Create and register a thought experiment seeded with one note."""
        experiment = create_thought_experiment(
            experiment_id, task, thought, start_time or self.clock(), end_time
        )
        self.store.add_experiment(experiment)
        return experiment

    def add_thought(self, experiment: ExperimentRef, thought: str) -> Experiment:
        """Append a note to a thought experiment."""
        found = self.find_experiment(experiment)
        found.add_thought(thought)
        logger.debug(f"Added thought to experiment {found.experiment_id}")
        return found

    def complete_experiment(
        self,
        experiment: ExperimentRef,
        end_time: Optional[datetime] = None,
    ) -> Experiment:
        """
        Mark an experiment complete.

        Without an explicit end time the clock is read and truncated to
        whole seconds. Completing twice overwrites the end time.
        """
        found = self.find_experiment(experiment)
        if end_time is None:
            end_time = self.clock().replace(microsecond=0)
        if found.complete:
            logger.info(f"Experiment {found.experiment_id} already complete, overwriting end time")
        found.mark_complete(end_time)
        logger.info(f"Completed experiment {found.experiment_id} at {end_time.isoformat()}")
        return found

    # ------------------------------------------------------------------
    # Measurements
    # ------------------------------------------------------------------

    def add_measurement(
        self,
        experiment: ExperimentRef,
        unit: Any,
        value: Any,
        now: Optional[datetime] = None,
    ) -> Measurement:
        """
        Record a measurement taken now.

        The measurement time is the duration elapsed since the experiment
        started, as duration text.

        Args:
            experiment: Experiment id or object
            unit: Unit symbol (unknown symbols are stored as "none")
            value: Observed value
            now: Time of the measurement (read from the clock if None)

        Returns:
            The stored Measurement

        Raises:
            NotFoundError: Unknown experiment
            InvalidOperationError: Thought experiment, or completed experiment
                when measurements after completion are not allowed
        """
        found = self.find_experiment(experiment)
        if found.is_thought:
            raise InvalidOperationError(
                f"Thought experiment {found.experiment_id} does not take measurements",
                {"experiment_id": found.experiment_id},
            )
        if found.complete and not self.config.allow_measurements_after_completion:
            raise InvalidOperationError(
                f"Experiment {found.experiment_id} is complete",
                {"experiment_id": found.experiment_id},
            )

        time = found.elapsed(now or self.clock())
        return self.store.create_measurement(found.experiment_id, unit, value, time)

    def get_measurements(self, experiment: ExperimentRef) -> List[Measurement]:
        """Measurements of an experiment in insertion order."""
        found = self.find_experiment(experiment)
        return self.store.get_measurements(found.experiment_id)

    def sorted_measurements(self, experiment: ExperimentRef, reverse: bool = False) -> List[Measurement]:
        """Measurements of an experiment ordered by value."""
        return sort_measurements(self.get_measurements(experiment), reverse=reverse)

    def measurement_time(self, experiment: ExperimentRef, measurement: Measurement) -> datetime:
        """Absolute time of a measurement: experiment start plus its offset."""
        found = self.find_experiment(experiment)
        return found.start_time + timedelta(milliseconds=measurement.time_ms)

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    def summarize(self, experiment: ExperimentRef) -> MeasurementSummary:
        """Count, average, min, max and average ratio of an experiment's measurements."""
        return summarize(
            self.get_measurements(experiment),
            precision=self.config.precision,
            empty=self.config.empty_average,
        )

    def average_by_unit(self, *experiments: ExperimentRef) -> Dict[str, UnitAverage]:
        """Per-unit averages over the measurements of one or more experiments."""
        measurements: List[Measurement] = []
        for experiment in experiments:
            measurements.extend(self.get_measurements(experiment))
        return average_by_unit(
            measurements,
            units=self.config.aggregation_units,
            precision=self.config.precision,
            empty=self.config.empty_average,
        )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, experiment: ExperimentRef, sort: bool = False) -> str:
        """Experiment line plus a measurement table and summary."""
        found = self.find_experiment(experiment)
        lines = [format_experiment(found)]
        if found.is_thought:
            return lines[0]

        measurements = (
            self.sorted_measurements(found) if sort else self.get_measurements(found)
        )
        summary = self.summarize(found)
        lines.append(format_measurement_table(measurements))
        lines.append(
            f"Average: {summary.average} "
            f"(min={summary.minimum}, max={summary.maximum}, "
            f"ratio={summary.average_ratio:.1f}%)"
        )
        return "\n".join(lines)

    def get_statistics(self) -> Dict[str, Any]:
        """Get tracker statistics."""
        return {
            "store": self.store.get_statistics(),
            "measurements_created": self.store.measurement_factory.total_created,
            "unrecognized_units": self.store.measurement_factory.unrecognized_units,
        }
