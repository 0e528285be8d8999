"""
Core Data Models for DukeLabs
=============================

Implements:
- SIUnit: Closed set of SI base units (plus an unrecognized marker)
- Measurement: Immutable observed value with unit and time offset
- ExperimentKind: Variant tag for experiments
- Experiment: Tracked task with budget and time window; the THOUGHT
  variant carries an ordered list of notes and a zero budget
- ONGOING: Sentinel end time of an experiment that is not complete
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Any, Union
from enum import Enum
from datetime import datetime

from .duration import parse_duration, format_duration, elapsed_milliseconds
from .errors import InvalidOperationError
from .formatting import format_experiment, format_measurement


class SIUnit(Enum):
    """
    SI base units accepted for measurements.

    NONE marks a unit symbol outside the set; it is stored instead of
    rejecting the measurement.
    """
    SECOND = "s"
    METRE = "m"
    KILOGRAM = "kg"
    AMPERE = "A"
    KELVIN = "K"
    MOLE = "mol"
    CANDELA = "cd"
    NONE = "none"

    @classmethod
    def from_symbol(cls, symbol: Any) -> "SIUnit":
        """Resolve a unit symbol (case-sensitive), falling back to NONE."""
        if isinstance(symbol, cls):
            return symbol
        for unit in cls:
            if unit is not cls.NONE and unit.value == symbol:
                return unit
        return cls.NONE

    @property
    def recognized(self) -> bool:
        return self is not SIUnit.NONE

    def __str__(self) -> str:
        return self.value


class Ongoing(Enum):
    """End time reported by an experiment that has not completed."""
    ONGOING = "ongoing"

    def __str__(self) -> str:
        return self.value


ONGOING = Ongoing.ONGOING


class ExperimentKind(Enum):
    """Variant tag for experiments."""
    EMPIRICAL = "empirical"  # Numeric measurements via the store
    THOUGHT = "thought"      # Free-text notes, zero budget


@dataclass(frozen=True)
class Measurement:
    """
    A single observed value.

    Immutable once created. Instances are normally produced by
    MeasurementFactory, which stamps a fresh id and resolves the unit.

    Attributes:
        measurement_id: Positive id, unique within a factory's allocator
        unit: SI unit (SIUnit.NONE if the input symbol was not recognized)
        value: Observed value, stored as given
        time: Offset from the experiment start as duration text ("PT2M12S")
    """
    measurement_id: int
    unit: SIUnit
    value: Any
    time: str

    @property
    def time_ms(self) -> int:
        """Offset from the experiment start in milliseconds."""
        return parse_duration(self.time)

    def __str__(self) -> str:
        return format_measurement(self)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "measurement_id": self.measurement_id,
            "unit": self.unit.value,
            "value": self.value,
            "time": self.time,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Measurement":
        """Deserialize from dictionary."""
        return cls(
            measurement_id=data["measurement_id"],
            unit=SIUnit.from_symbol(data.get("unit")),
            value=data["value"],
            time=data["time"],
        )


@dataclass(eq=False)
class Experiment:
    """
    A tracked task with a budget and a time window.

    The end time is only observable once the experiment is complete;
    before that, `end_time` returns the ONGOING sentinel. Completion is
    one-way.

    Measurements are not held here: they are associated with the
    experiment through ExperimentStore.

    Attributes:
        experiment_id: Caller-supplied id (uniqueness enforced by the store)
        task: Free-text description
        budget: Non-negative, currency-agnostic amount
        start_time: When the experiment started
        kind: EMPIRICAL or THOUGHT
    """
    experiment_id: int
    task: str
    budget: float
    start_time: datetime
    kind: ExperimentKind = ExperimentKind.EMPIRICAL
    _end_time: Optional[datetime] = field(default=None, repr=False)
    _complete: bool = field(default=False, repr=False)
    _thoughts: List[str] = field(default_factory=list, repr=False)

    def __post_init__(self):
        if self.kind is ExperimentKind.THOUGHT:
            self.budget = 0
        elif self._thoughts:
            raise InvalidOperationError(
                f"Experiment {self.experiment_id} is not a thought experiment",
                {"experiment_id": self.experiment_id},
            )
        if self.budget < 0:
            raise ValueError(f"Budget must be non-negative, got {self.budget}")
        if self._complete and self._end_time is None:
            raise ValueError(
                f"Complete experiment {self.experiment_id} requires an end time"
            )

    @property
    def end_time(self) -> Union[datetime, Ongoing]:
        """End time if complete, ONGOING otherwise."""
        return self._end_time if self._complete else ONGOING

    @property
    def complete(self) -> bool:
        return self._complete

    @property
    def is_thought(self) -> bool:
        return self.kind is ExperimentKind.THOUGHT

    @property
    def thoughts(self) -> Tuple[str, ...]:
        """Notes of a thought experiment in the order they were added."""
        return tuple(self._thoughts)

    def mark_complete(self, end_time: datetime):
        """
        Complete the experiment at the given time.

        Calling it again overwrites the end time; there is no way back to
        the ongoing state.
        """
        self._end_time = end_time
        self._complete = True

    def add_thought(self, thought: str):
        """Append a note to a thought experiment."""
        if not self.is_thought:
            raise InvalidOperationError(
                f"Experiment {self.experiment_id} does not record thoughts",
                {"experiment_id": self.experiment_id},
            )
        self._thoughts.append(thought)

    def elapsed(self, now: datetime) -> str:
        """Duration text from the start time to `now`."""
        return format_duration(elapsed_milliseconds(self.start_time, now))

    def duration(self) -> Union[str, Ongoing]:
        """Total duration as text for a complete experiment, ONGOING otherwise."""
        if not self._complete:
            return ONGOING
        return self.elapsed(self._end_time)

    def __str__(self) -> str:
        return format_experiment(self)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary."""
        data = {
            "experiment_id": self.experiment_id,
            "kind": self.kind.value,
            "task": self.task,
            "budget": self.budget,
            "start_time": self.start_time.isoformat(),
            "end_time": self._end_time.isoformat() if self._complete else None,
            "complete": self._complete,
        }
        if self.is_thought:
            data["thoughts"] = list(self._thoughts)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Experiment":
        """Deserialize from dictionary."""
        end_time = data.get("end_time")
        return cls(
            experiment_id=data["experiment_id"],
            task=data["task"],
            budget=data.get("budget", 0),
            start_time=datetime.fromisoformat(data["start_time"]),
            kind=ExperimentKind(data.get("kind", "empirical")),
            _end_time=datetime.fromisoformat(end_time) if end_time else None,
            _complete=data.get("complete", end_time is not None),
            _thoughts=list(data.get("thoughts", [])),
        )
