# mini_tensegrity/observers/loggers.py
"""
DATA LOGGERS: Append-Mode CSV Records
=====================================

Each logger is an observer that appends one comma-separated line of numbers
per step to a caller-supplied file. Files are opened in append mode for every
record, so several runs (or several loggers) can share a file and a crash
never loses earlier lines.

    TimeLogger          t
    CenterOfMassLogger  x, y, z
    ActuatorLogger      t, rest_0, tension_0, rest_1, tension_1, ...

Read the files back with mini_tensegrity.post.load_log().
"""

from pathlib import Path
from typing import Iterable, Union

from ..errors import check_timestep
from .base import Observer

PathLike = Union[str, Path]


def append_record(path: PathLike, values: Iterable[float]) -> None:
    """Append one comma-separated numeric line to `path`."""
    line = ",".join(f"{float(v):.10g}" for v in values)
    with open(path, "a") as f:
        f.write(line + "\n")


class CSVLogger(Observer):
    """Base for loggers that write one record per step."""

    def __init__(self, path: PathLike):
        self.path = Path(path)
        self.time = 0.0
        self.n_records = 0

    def record(self, model) -> Iterable[float]:
        raise NotImplementedError

    def on_step(self, model, dt: float) -> None:
        self.time += check_timestep(dt)
        append_record(self.path, self.record(model))
        self.n_records += 1


class TimeLogger(CSVLogger):
    """Cumulative simulated time, one value per step."""

    def record(self, model):
        return [self.time]


class CenterOfMassLogger(CSVLogger):
    """Mass-weighted centre of the model's rigid bodies."""

    def record(self, model):
        return model.center_of_mass().tolist()


class ActuatorLogger(CSVLogger):
    """Time followed by (rest length, tension) for every actuator."""

    def record(self, model):
        values = [self.time]
        for cable in model.actuators:
            values.append(cable.rest_length)
            values.append(cable.tension)
        return values

    @staticmethod
    def column_names(n_actuators: int):
        names = ['time']
        for i in range(n_actuators):
            names.extend([f'rest_{i}', f'tension_{i}'])
        return names
