"""
DukeLabs - Main Entry Point
===========================

Loads seed data into an in-memory store and inspects or updates an
experiment from the command line.

Usage:
    python main.py                              # Show all seeded experiments
    python main.py --experiment 101             # Show one experiment
    python main.py --experiment 101 --add kg 3  # Add a measurement taken now
    python main.py --experiment 101 --complete  # Complete an experiment
    python main.py --seed data.json --sort      # Use a JSON seed file
"""

import argparse
import json
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from dukelabs import DukeLabsError, ExperimentTracker, TrackerConfig, default_seed

logger = logging.getLogger(__name__)


def build_tracker(seed_path=None) -> ExperimentTracker:
    """Create a tracker populated from a seed file or the demo data."""
    tracker = ExperimentTracker(TrackerConfig())
    if seed_path:
        tracker.store.load_seed_file(seed_path)
    else:
        tracker.store.load_seed(default_seed())
    return tracker


def show_all(tracker: ExperimentTracker, sort: bool):
    print("=" * 70)
    print("DUKELABS EXPERIMENTS")
    print("=" * 70)
    print()
    for experiment in tracker.store.list_experiments():
        print(tracker.render(experiment, sort=sort))
        print()

    averages = tracker.average_by_unit(*tracker.store.experiments)
    print("Average values: " + ", ".join(
        f"{unit}: {avg.mean:.2f} ({avg.count} values)" for unit, avg in averages.items()
    ))
    print()
    print(json.dumps(tracker.get_statistics(), indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="DukeLabs experiment tracker")
    parser.add_argument("--seed", help="JSON seed file (default: built-in demo data)")
    parser.add_argument("--experiment", type=int, help="Experiment id to inspect")
    parser.add_argument("--add", nargs=2, metavar=("UNIT", "VALUE"), help="Add a measurement")
    parser.add_argument("--complete", action="store_true", help="Complete the experiment now")
    parser.add_argument("--sort", action="store_true", help="Sort measurements by value")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def parse_args(argv=None) -> argparse.Namespace:
    """
    Parse and validate command-line arguments.

    A measurement given with --add is returned as `unit` and a float `value`.
    Invalid combinations exit through parser.error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.experiment is None and (args.add or args.complete):
        parser.error("--add and --complete require --experiment")

    args.unit, args.value = None, None
    if args.add:
        args.unit = args.add[0]
        try:
            args.value = float(args.add[1])
        except ValueError:
            parser.error(f"--add VALUE must be a number, got {args.add[1]!r}")
    return args


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        tracker = build_tracker(args.seed)

        if args.experiment is None:
            show_all(tracker, args.sort)
            return

        if args.add:
            measurement = tracker.add_measurement(args.experiment, args.unit, args.value)
            print(f"Added {measurement}")
        if args.complete:
            tracker.complete_experiment(args.experiment)

        print(tracker.render(args.experiment, sort=args.sort))
    except DukeLabsError as e:
        logger.error(e.message)
        sys.exit(1)


if __name__ == "__main__":
    main()
