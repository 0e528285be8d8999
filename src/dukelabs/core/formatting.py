"""
Formatting Helpers
==================

Human-readable rendering of experiments and measurements.

Locale-specific output (currency symbols, localized dates) is left to the
host application: budgets are rendered as plain amounts with at most two
decimals and timestamps as ISO-8601.
"""

from typing import Any, Iterable, List, Tuple

ONGOING_LABEL = "on going"


def format_number(value: Any) -> str:
    """Render a numeric value without a trailing '.0' for whole floats."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_amount(amount: float) -> str:
    """Render a budget with between zero and two fraction digits."""
    text = f"{float(amount):.2f}"
    return text.rstrip("0").rstrip(".")


def format_timestamp(moment) -> str:
    return moment.isoformat(timespec="seconds")


def format_measurement(measurement) -> str:
    """
    Render a measurement as "Measurement <id> <unit> <value> <time>".

    An unrecognized unit renders as "none".
    """
    return (
        f"Measurement {measurement.measurement_id} {measurement.unit} "
        f"{format_number(measurement.value)} {measurement.time}"
    )


def format_experiment(experiment) -> str:
    """
    Render an experiment on one line, followed by its thoughts for
    thought experiments.

    Example:
        Experiment 101 "Measure Weight" Budget: 123.45 2022-04-16T06:07:00 on going
    """
    result = f'Experiment {experiment.experiment_id} "{experiment.task}" '
    result += f"Budget: {format_amount(experiment.budget)} "
    result += format_timestamp(experiment.start_time) + " "
    if experiment.complete:
        result += format_timestamp(experiment.end_time)
    else:
        result += ONGOING_LABEL

    if experiment.is_thought:
        result += "\nThoughts:"
        for thought in experiment.thoughts:
            result += f"\n - {thought}"
    return result


def measurement_rows(measurements: Iterable) -> List[Tuple[str, str, str, str]]:
    """Table rows (id, unit, value, time) for display by the host UI."""
    return [
        (
            str(m.measurement_id),
            str(m.unit),
            format_number(m.value),
            m.time,
        )
        for m in measurements
    ]


def format_measurement_table(measurements: Iterable) -> str:
    """Render measurements as a fixed-width text table."""
    rows = measurement_rows(measurements)
    lines = [f"{'ID':<6} {'Unit':<6} {'Value':<12} {'Time':<14}", "-" * 40]
    for mid, unit, value, time in rows:
        lines.append(f"{mid:<6} {unit:<6} {value:<12} {time:<14}")
    return "\n".join(lines)
