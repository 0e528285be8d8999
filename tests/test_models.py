"""
Unit tests for core data models.
"""

import unittest
import dataclasses
from datetime import datetime

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from dukelabs.core.models import (
    Measurement, Experiment, ExperimentKind, SIUnit, ONGOING
)
from dukelabs.core.factory import (
    create_ongoing_experiment, create_complete_experiment, create_thought_experiment
)
from dukelabs.core.errors import InvalidOperationError


class TestSIUnit(unittest.TestCase):
    """Tests for SIUnit."""

    def test_recognized_symbols(self):
        """Test every SI base unit symbol resolves."""
        for symbol in ["s", "m", "kg", "A", "K", "mol", "cd"]:
            unit = SIUnit.from_symbol(symbol)
            self.assertTrue(unit.recognized)
            self.assertEqual(str(unit), symbol)

    def test_unrecognized_symbol(self):
        """Test unknown symbols degrade to NONE."""
        self.assertIs(SIUnit.from_symbol("lb"), SIUnit.NONE)
        self.assertIs(SIUnit.from_symbol("KG"), SIUnit.NONE)
        self.assertIs(SIUnit.from_symbol(None), SIUnit.NONE)
        self.assertFalse(SIUnit.NONE.recognized)
        self.assertEqual(str(SIUnit.NONE), "none")


class TestMeasurement(unittest.TestCase):
    """Tests for Measurement."""

    def test_immutable(self):
        """Test measurements cannot be modified."""
        m = Measurement(measurement_id=1, unit=SIUnit.KILOGRAM, value=42, time="PT2M12S")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            m.value = 43

    def test_time_ms(self):
        """Test the offset in milliseconds."""
        m = Measurement(1, SIUnit.KILOGRAM, 42, "PT2M12S")
        self.assertEqual(m.time_ms, 132000)

    def test_str(self):
        """Test string rendering."""
        self.assertEqual(
            str(Measurement(1, SIUnit.KILOGRAM, 42, "PT2M12S")),
            "Measurement 1 kg 42 PT2M12S",
        )
        self.assertEqual(
            str(Measurement(2, SIUnit.NONE, 2.5, "PT0S")),
            "Measurement 2 none 2.5 PT0S",
        )

    def test_serialization(self):
        """Test dict round trip."""
        m = Measurement(7, SIUnit.METRE, 12, "PT20M")
        data = m.to_dict()
        self.assertEqual(data["unit"], "m")
        self.assertEqual(Measurement.from_dict(data), m)


class TestExperiment(unittest.TestCase):
    """Tests for Experiment."""

    def setUp(self):
        self.start = datetime(2022, 4, 16, 6, 7)

    def test_ongoing(self):
        """Test an ongoing experiment reports the ONGOING sentinel."""
        e = create_ongoing_experiment(101, "Measure Weight", 123.45, self.start)
        self.assertFalse(e.complete)
        self.assertIs(e.end_time, ONGOING)
        self.assertEqual(str(e.end_time), "ongoing")
        self.assertIs(e.duration(), ONGOING)

    def test_complete(self):
        """Test a complete experiment exposes its end time."""
        end = datetime(2022, 5, 2, 21, 12)
        e = create_complete_experiment(102, "Measure Length", 321.54,
                                       datetime(2022, 5, 1, 14, 30), end)
        self.assertTrue(e.complete)
        self.assertEqual(e.end_time, end)
        self.assertEqual(e.duration(), "PT30H42M")

    def test_mark_complete(self):
        """Test completion is one-way and can be repeated."""
        e = create_ongoing_experiment(101, "Measure Weight", 123.45, self.start)
        first = datetime(2022, 4, 16, 8, 0)
        second = datetime(2022, 4, 16, 9, 0)

        e.mark_complete(first)
        self.assertTrue(e.complete)
        self.assertEqual(e.end_time, first)

        e.mark_complete(second)
        self.assertTrue(e.complete)
        self.assertEqual(e.end_time, second)

    def test_negative_budget(self):
        """Test budgets must be non-negative."""
        with self.assertRaises(ValueError):
            create_ongoing_experiment(1, "t", -1, self.start)

    def test_complete_requires_end_time(self):
        """Test a complete experiment without end time is rejected."""
        with self.assertRaises(ValueError):
            Experiment(1, "t", 0, self.start, _complete=True)

    def test_add_thought_to_empirical(self):
        """Test empirical experiments do not take thoughts."""
        e = create_ongoing_experiment(101, "Measure Weight", 123.45, self.start)
        with self.assertRaises(InvalidOperationError):
            e.add_thought("Hmm")

    def test_str(self):
        """Test string rendering of an ongoing experiment."""
        e = create_ongoing_experiment(101, "Measure Weight", 123.45, self.start)
        self.assertEqual(
            str(e),
            'Experiment 101 "Measure Weight" Budget: 123.45 2022-04-16T06:07:00 on going',
        )

    def test_serialization(self):
        """Test dict round trip."""
        e = create_complete_experiment(102, "Measure Length", 321.54,
                                       datetime(2022, 5, 1, 14, 30),
                                       datetime(2022, 5, 2, 21, 12))
        restored = Experiment.from_dict(e.to_dict())
        self.assertEqual(restored.experiment_id, 102)
        self.assertEqual(restored.budget, 321.54)
        self.assertTrue(restored.complete)
        self.assertEqual(restored.end_time, datetime(2022, 5, 2, 21, 12))

        ongoing = Experiment.from_dict(
            create_ongoing_experiment(101, "t", 1, self.start).to_dict()
        )
        self.assertIs(ongoing.end_time, ONGOING)


class TestThoughtExperiment(unittest.TestCase):
    """Tests for the thought experiment variant."""

    def setUp(self):
        self.experiment = create_thought_experiment(
            103, "Predict race results", "Predict the winner of any race.",
            datetime(2022, 5, 3, 9, 0),
        )

    def test_budget_forced_to_zero(self):
        """Test the budget is always zero."""
        self.assertEqual(self.experiment.budget, 0)
        e = Experiment(104, "t", 50, datetime(2022, 1, 1), kind=ExperimentKind.THOUGHT,
                       _thoughts=["x"])
        self.assertEqual(e.budget, 0)

    def test_thoughts_append(self):
        """Test thoughts keep their order."""
        self.experiment.add_thought("Spherical horses in a vacuum.")
        self.assertEqual(
            self.experiment.thoughts,
            ("Predict the winner of any race.", "Spherical horses in a vacuum."),
        )

    def test_thoughts_read_only(self):
        """Test the returned thoughts cannot alter the experiment."""
        thoughts = self.experiment.thoughts
        self.assertIsInstance(thoughts, tuple)
        self.assertEqual(len(self.experiment.thoughts), 1)

    def test_str(self):
        """Test rendering lists the thoughts."""
        self.experiment.add_thought("Spherical horses in a vacuum.")
        self.assertEqual(
            str(self.experiment),
            'Experiment 103 "Predict race results" Budget: 0 2022-05-03T09:00:00 on going'
            "\nThoughts:"
            "\n - Predict the winner of any race."
            "\n - Spherical horses in a vacuum.",
        )

    def test_serialization(self):
        """Test thoughts survive a dict round trip."""
        restored = Experiment.from_dict(self.experiment.to_dict())
        self.assertTrue(restored.is_thought)
        self.assertEqual(restored.thoughts, self.experiment.thoughts)


if __name__ == '__main__':
    unittest.main()
