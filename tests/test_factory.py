"""
Unit tests for entity factories.
"""

import unittest
from datetime import datetime

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from dukelabs.core.factory import (
    IdAllocator,
    MeasurementFactory,
    create_ongoing_experiment,
    create_complete_experiment,
    create_thought_experiment,
)
from dukelabs.core.models import SIUnit, ExperimentKind, ONGOING


class TestIdAllocator(unittest.TestCase):
    """Tests for IdAllocator."""

    def test_starts_at_one(self):
        """Test the default first id."""
        allocator = IdAllocator()
        self.assertEqual(allocator.peek(), 1)
        self.assertEqual(allocator.allocate(), 1)
        self.assertEqual(allocator.allocate(), 2)
        self.assertEqual(allocator.total_allocated, 2)

    def test_strictly_increasing(self):
        """Test ids never repeat."""
        allocator = IdAllocator()
        ids = [allocator.allocate() for _ in range(50)]
        self.assertEqual(ids, sorted(set(ids)))

    def test_invalid_start(self):
        """Test ids must be positive."""
        with self.assertRaises(ValueError):
            IdAllocator(start=0)

    def test_advance_past(self):
        """Test skipping ids already in use."""
        allocator = IdAllocator()
        allocator.advance_past(10)
        self.assertEqual(allocator.allocate(), 11)

        # Lower ids never move the counter back
        allocator.advance_past(3)
        self.assertEqual(allocator.allocate(), 12)


class TestMeasurementFactory(unittest.TestCase):
    """Tests for MeasurementFactory."""

    def setUp(self):
        self.factory = MeasurementFactory()

    def test_create(self):
        """Test measurement creation."""
        m = self.factory.create("kg", 42, "PT2M12S")

        self.assertEqual(m.measurement_id, 1)
        self.assertIs(m.unit, SIUnit.KILOGRAM)
        self.assertEqual(m.value, 42)
        self.assertEqual(m.time, "PT2M12S")
        self.assertEqual(self.factory.total_created, 1)

    def test_ids_increase(self):
        """Test each measurement gets a fresh id."""
        first = self.factory.create("kg", 1, "PT0S")
        second = self.factory.create("m", 2, "PT0S")
        self.assertLess(first.measurement_id, second.measurement_id)

    def test_unrecognized_unit(self):
        """Test unknown units are stored as NONE rather than rejected."""
        m = self.factory.create("furlong", 3, "PT1S")
        self.assertIs(m.unit, SIUnit.NONE)
        self.assertEqual(self.factory.unrecognized_units, 1)

    def test_value_and_time_as_given(self):
        """Test value and time are not validated."""
        m = self.factory.create("s", "12", "later")
        self.assertEqual(m.value, "12")
        self.assertEqual(m.time, "later")

    def test_independent_allocators(self):
        """Test separate factories do not share ids."""
        other = MeasurementFactory(IdAllocator())
        self.assertEqual(self.factory.create("kg", 1, "PT0S").measurement_id, 1)
        self.assertEqual(other.create("kg", 1, "PT0S").measurement_id, 1)


class TestExperimentConstructors(unittest.TestCase):
    """Tests for the experiment constructors."""

    def setUp(self):
        self.start = datetime(2022, 5, 1, 14, 30)

    def test_ongoing(self):
        e = create_ongoing_experiment(101, "Measure Weight", 123.45, self.start)
        self.assertEqual(e.experiment_id, 101)
        self.assertEqual(e.task, "Measure Weight")
        self.assertEqual(e.start_time, self.start)
        self.assertIs(e.kind, ExperimentKind.EMPIRICAL)
        self.assertIs(e.end_time, ONGOING)

    def test_complete(self):
        end = datetime(2022, 5, 2, 21, 12)
        e = create_complete_experiment(102, "Measure Length", 321.54, self.start, end)
        self.assertTrue(e.complete)
        self.assertEqual(e.end_time, end)

    def test_thought(self):
        e = create_thought_experiment(103, "Predict", "First thought", self.start)
        self.assertTrue(e.is_thought)
        self.assertEqual(e.budget, 0)
        self.assertEqual(e.thoughts, ("First thought",))
        self.assertFalse(e.complete)

    def test_thought_complete(self):
        end = datetime(2022, 5, 1, 15, 0)
        e = create_thought_experiment(103, "Predict", "First thought", self.start, end)
        self.assertTrue(e.complete)
        self.assertEqual(e.duration(), "PT30M")


if __name__ == '__main__':
    unittest.main()
