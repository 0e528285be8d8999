"""
Storage components for DukeLabs.
"""

from .store import ExperimentStore, default_seed

__all__ = [
    "ExperimentStore",
    "default_seed",
]
