# File: tests/test_loggers.py
"""
Test the CSV logger observers and reading their output back with pandas.
"""

import numpy as np
import pytest

from mini_tensegrity import CableConfig, RodConfig, Simulation, TensegrityModel, World, WorldConfig
from mini_tensegrity.generative import default_build_spec, planar_two_bar
from mini_tensegrity.observers import (
    ActuatorLogger,
    CenterOfMassLogger,
    ConstantTensionController,
    TimeLogger,
    append_record,
)
from mini_tensegrity.post import actuator_summary, cable_history_frame, load_log


def make_sim(history=False):
    spec = default_build_spec(
        RodConfig(radius=0.31, density=0.2),
        CableConfig(stiffness=1000.0, damping=10.0, history=history),
    )
    model = TensegrityModel(planar_two_bar(), spec, name="planar")
    sim = Simulation(World(WorldConfig(gravity=(0.0, 0.0, 0.0))))
    return sim, model


def test_loggers_write_one_line_per_step(tmp_path):
    """
    WHAT IS THIS TEST?
    ==================
    Three loggers on one model, three steps: each file has three lines with
    the expected number of columns.
    """
    sim, model = make_sim()
    time_log = TimeLogger(tmp_path / "time.csv")
    com_log = CenterOfMassLogger(tmp_path / "com.csv")
    act_log = ActuatorLogger(tmp_path / "actuators.csv")
    for obs in (time_log, com_log, act_log):
        model.attach(obs)
    sim.add_model(model)

    for _ in range(3):
        sim.step(0.01)

    times = load_log(tmp_path / "time.csv", columns=["time"])
    np.testing.assert_allclose(times["time"], [0.01, 0.02, 0.03])

    com = load_log(tmp_path / "com.csv", columns=["x", "y", "z"])
    assert com.shape == (3, 3)
    # No gravity, no tension: the centre of mass does not move
    np.testing.assert_allclose(com.to_numpy(), [[20.0, 10.0, 10.0]] * 3)

    actuators = load_log(tmp_path / "actuators.csv", columns=ActuatorLogger.column_names(4))
    assert actuators.shape == (3, 9)
    np.testing.assert_allclose(actuators["rest_0"], [40.0] * 3)
    assert act_log.n_records == 3
    print("✓ Loggers wrote 3 records each")


def test_logs_append_across_runs(tmp_path):
    path = tmp_path / "time.csv"
    for _ in range(2):
        sim, model = make_sim()
        logger = TimeLogger(path)
        model.attach(logger)
        sim.add_model(model)
        sim.run(2, 0.5)
        sim.reset()
    df = load_log(path)
    np.testing.assert_allclose(df[0], [0.5, 1.0, 0.5, 1.0])


def test_load_log_rejects_wrong_column_count(tmp_path):
    path = tmp_path / "rec.csv"
    append_record(path, [1.0, 2.0, 3.0])
    with pytest.raises(ValueError):
        load_log(path, columns=["a", "b"])


def test_cable_history_frame():
    sim, model = make_sim(history=True)
    controller = ConstantTensionController(tension=10.0)
    model.attach(controller)
    sim.add_model(model)
    sim.run(5, 0.01)

    frame = cable_history_frame(model.actuators[0])
    assert list(frame.columns) == ["time", "rest_length", "length", "tension"]
    assert len(frame) == 5
    assert frame["rest_length"].iloc[-1] < 40.0


def test_cable_history_frame_requires_history():
    sim, model = make_sim()
    sim.add_model(model)
    with pytest.raises(ValueError):
        cable_history_frame(model.actuators[0])


def test_actuator_summary_has_one_row_per_cable():
    sim, model = make_sim()
    sim.add_model(model)
    summary = actuator_summary(model.actuators)
    assert len(summary) == 4
    assert summary["pair_id"].tolist() == [2, 3, 4, 5]
    assert summary[["point_a", "point_b"]].values.tolist() == [[0, 1], [1, 2], [2, 3], [3, 0]]
