"""
Experiment Store
================

In-memory registry relating experiments and measurements:
- experiments: experiment id -> Experiment
- measurements: measurement id -> Measurement
- by_experiment: experiment id -> measurements of that experiment
  (insertion ordered, created empty when the experiment is added)

Every experiment in `experiments` has an entry in `by_experiment`, and every
measurement reachable from `by_experiment` is also in `measurements`.
Nothing is ever deleted; the store lives as long as the process.
"""

from typing import Dict, List, Optional, Any
from collections import Counter
from datetime import datetime
import json
import logging

from ..core.models import Experiment, Measurement
from ..core.factory import (
    IdAllocator,
    MeasurementFactory,
    create_ongoing_experiment,
    create_complete_experiment,
    create_thought_experiment,
)
from ..core.errors import DuplicateKeyError, NotFoundError

logger = logging.getLogger(__name__)


class ExperimentStore:
    """
    Dual-indexed store for experiments and their measurements.

    Owns the IdAllocator used for measurement ids so that each store (and
    each test) starts from a known id.
    """

    def __init__(self, allocator: Optional[IdAllocator] = None):
        """
        Initialize the store.

        Args:
            allocator: Measurement id source (fresh allocator if None)
        """
        self.experiments: Dict[int, Experiment] = {}
        self.measurements: Dict[int, Measurement] = {}
        self.by_experiment: Dict[int, Dict[int, Measurement]] = {}

        self.allocator = allocator or IdAllocator()
        self.measurement_factory = MeasurementFactory(self.allocator)

        # Statistics
        self.total_experiments_added = 0
        self.total_measurements_added = 0

        logger.info("ExperimentStore initialized")

    def add_experiment(self, experiment: Experiment):
        """
        Register an experiment with an empty measurement set.

        Raises:
            DuplicateKeyError: If the id is already registered
        """
        experiment_id = experiment.experiment_id
        if experiment_id in self.experiments:
            logger.warning(f"Rejected duplicate experiment id {experiment_id}")
            raise DuplicateKeyError(experiment_id)

        self.experiments[experiment_id] = experiment
        self.by_experiment[experiment_id] = {}
        self.total_experiments_added += 1

        logger.info(
            f"Registered experiment {experiment_id} "
            f"(kind={experiment.kind.value}, complete={experiment.complete})"
        )

    def add_measurement(self, experiment_id: int, measurement: Measurement):
        """
        Attach a measurement to an experiment.

        Raises:
            NotFoundError: If no experiment has this id
            DuplicateKeyError: If the measurement id is already stored

        The store is left unchanged on failure. The allocator is advanced past
        the id so measurements created later never collide with it.
        """
        measurements = self.by_experiment.get(experiment_id)
        if measurements is None:
            logger.warning(
                f"Rejected measurement {measurement.measurement_id} "
                f"for unknown experiment {experiment_id}"
            )
            raise NotFoundError(experiment_id)

        if measurement.measurement_id in self.measurements:
            logger.warning(f"Rejected duplicate measurement id {measurement.measurement_id}")
            raise DuplicateKeyError(measurement.measurement_id, "Measurement")

        self.measurements[measurement.measurement_id] = measurement
        measurements[measurement.measurement_id] = measurement
        self.total_measurements_added += 1
        self.allocator.advance_past(measurement.measurement_id)

        logger.debug(
            f"Added measurement {measurement.measurement_id} to experiment {experiment_id}"
        )

    def create_measurement(self, experiment_id: int, unit: Any, value: Any, time: str) -> Measurement:
        """
        Create a measurement with this store's allocator and attach it.

        The experiment is checked first so no id is consumed on failure.
        """
        if experiment_id not in self.experiments:
            logger.warning(f"Cannot create measurement for unknown experiment {experiment_id}")
            raise NotFoundError(experiment_id)

        measurement = self.measurement_factory.create(unit, value, time)
        self.add_measurement(experiment_id, measurement)
        return measurement

    def get_experiment(self, experiment_id: int) -> Optional[Experiment]:
        """Get an experiment by id."""
        return self.experiments.get(experiment_id)

    def get_measurement(self, measurement_id: int) -> Optional[Measurement]:
        """Get a measurement by id."""
        return self.measurements.get(measurement_id)

    def get_measurements(self, experiment_id: int) -> Optional[List[Measurement]]:
        """
        Measurements of an experiment in insertion order.

        Returns None if the experiment does not exist and an empty list if
        it exists without measurements.
        """
        measurements = self.by_experiment.get(experiment_id)
        if measurements is None:
            return None
        return list(measurements.values())

    def list_experiments(self) -> List[Experiment]:
        """All experiments in registration order."""
        return list(self.experiments.values())

    def __contains__(self, experiment_id) -> bool:
        return experiment_id in self.experiments

    def __len__(self) -> int:
        return len(self.experiments)

    # ------------------------------------------------------------------
    # Seed data
    # ------------------------------------------------------------------

    def load_seed(self, seed: Dict[str, Any]) -> int:
        """
        Populate the store from seed data.

        Format:
            {
                "experiments": [Experiment.to_dict() style records],
                "measurements": [
                    {"experiment_id": 101, "unit": "kg", "value": 42, "time": "PT2M12S"},
                    ...
                ]
            }

        Measurement records may carry a "measurement_id"; the allocator is
        advanced past it so later ids stay unique.

        Returns:
            Number of measurements loaded
        """
        for record in seed.get("experiments", []):
            self.add_experiment(Experiment.from_dict(record))

        loaded = 0
        for record in seed.get("measurements", []):
            experiment_id = record["experiment_id"]
            if "measurement_id" in record:
                self.add_measurement(experiment_id, Measurement.from_dict(record))
            else:
                self.create_measurement(
                    experiment_id, record["unit"], record["value"], record["time"]
                )
            loaded += 1

        logger.info(
            f"Loaded seed data: {len(seed.get('experiments', []))} experiments, "
            f"{loaded} measurements"
        )
        return loaded

    def load_seed_file(self, path: str) -> int:
        """Populate the store from a JSON seed file (see load_seed)."""
        with open(path, "r", encoding="utf-8") as f:
            seed = json.load(f)
        return self.load_seed(seed)

    def export_state(self) -> Dict[str, Any]:
        """Snapshot of the store in the seed format."""
        return {
            "experiments": [e.to_dict() for e in self.experiments.values()],
            "measurements": [
                dict(m.to_dict(), experiment_id=experiment_id)
                for experiment_id, measurements in self.by_experiment.items()
                for m in measurements.values()
            ],
        }

    def get_statistics(self) -> Dict[str, Any]:
        """Get store statistics."""
        unit_counts = Counter(m.unit.value for m in self.measurements.values())
        complete = sum(1 for e in self.experiments.values() if e.complete)

        return {
            "total_experiments": len(self.experiments),
            "complete_experiments": complete,
            "ongoing_experiments": len(self.experiments) - complete,
            "thought_experiments": sum(1 for e in self.experiments.values() if e.is_thought),
            "total_measurements": len(self.measurements),
            "unit_distribution": dict(unit_counts),
            "next_measurement_id": self.allocator.peek(),
        }


def default_seed() -> Dict[str, Any]:
    """Demo data: experiments 101 to 103 and five measurements."""
    return {
        "experiments": [
            create_ongoing_experiment(
                101, "Measure Weight", 123.45, datetime(2022, 4, 16, 6, 7)
            ).to_dict(),
            create_complete_experiment(
                102, "Measure Length", 321.54,
                datetime(2022, 5, 1, 14, 30), datetime(2022, 5, 2, 21, 12),
            ).to_dict(),
            create_thought_experiment(
                103, "Predict race results", "Predict the winner of any race.",
                datetime(2022, 5, 3, 9, 0),
            ).to_dict(),
        ],
        "measurements": [
            {"experiment_id": 101, "unit": "kg", "value": 42, "time": "PT2M12S"},
            {"experiment_id": 101, "unit": "kg", "value": 40, "time": "PT3M10S"},
            {"experiment_id": 101, "unit": "kg", "value": 3, "time": "PT3M55S"},
            {"experiment_id": 102, "unit": "m", "value": 12, "time": "PT20M"},
            {"experiment_id": 102, "unit": "m", "value": 10, "time": "PT1H22M10S"},
        ],
    }
