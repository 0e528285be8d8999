"""
Exception Hierarchy
===================

All DukeLabs-specific exceptions inherit from DukeLabsError so a host
application can catch every core failure in one place:

    try:
        tracker.add_measurement(101, "kg", 3)
    except DukeLabsError as e:
        show_alert(e.message)

Unrecognized units are deliberately absent here: an unknown unit degrades
to SIUnit.NONE instead of raising.
"""

from typing import Any, Dict, Optional


class DukeLabsError(Exception):
    """
    Base exception for all DukeLabs errors.

    Attributes:
        message: Human-readable error description
        details: Additional context (ids, offending input)
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class FormatError(DukeLabsError, ValueError):
    """Raised when duration text does not match PT[nH][nM][nS]."""

    def __init__(self, text: Any):
        super().__init__(
            f"Invalid duration {text!r}: expected the form PT[<h>H][<m>M][<s>S]",
            {"text": text},
        )


class NotFoundError(DukeLabsError, LookupError):
    """Raised when an operation references an experiment id absent from the store."""

    def __init__(self, experiment_id: Any):
        self.experiment_id = experiment_id
        super().__init__(
            f"Experiment with id {experiment_id} not found",
            {"experiment_id": experiment_id},
        )


class DuplicateKeyError(DukeLabsError, LookupError):
    """Raised when an experiment (or seeded measurement) id is already registered."""

    def __init__(self, key: Any, entity: str = "Experiment"):
        self.key = key
        super().__init__(
            f"{entity} with id {key} already exists",
            {"key": key, "entity": entity},
        )


class InvalidOperationError(DukeLabsError):
    """Raised when an experiment variant does not support the requested operation."""
    pass
