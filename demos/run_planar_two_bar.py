#!/usr/bin/env python3
"""
RUN_PLANAR_TWO_BAR: Smallest Controlled Tensegrity
==================================================

This demo walks the whole pipeline on the planar two-bar structure:
1. Generate the structure (4 points, 2 rods, 4 cables)
2. Bind tags to builders in a BuildSpec
3. Compile it into a world through a TensegrityModel
4. Hold every cable at a constant tension while the structure falls
5. Print the actuator state and the centre-of-mass trace

Run with:
    python demos/run_planar_two_bar.py
"""

import logging
import sys
import tempfile
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from mini_tensegrity import Simulation, TensegrityModel, World
from mini_tensegrity.generative import PlanarParams, default_build_spec, planar_two_bar
from mini_tensegrity.observers import CenterOfMassLogger, ConstantTensionController
from mini_tensegrity.post import actuator_summary, load_log


def print_header(text: str):
    """Print a formatted section header."""
    print("\n" + "=" * 60)
    print(f"  {text}")
    print("=" * 60)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print_header("PLANAR TWO-BAR TENSEGRITY")

    # =========================================================================
    # STEP 1: GEOMETRY
    # =========================================================================
    print_header("STEP 1: Structure")
    params = PlanarParams()
    structure = planar_two_bar(params)
    print(f"\n{structure}")
    for k, p in enumerate(structure.points):
        print(f"  Point {k}: ({p[0]:6.2f}, {p[1]:6.2f}, {p[2]:6.2f})")
    for pair in structure.pairs:
        print(f"  Pair {pair.id}: {pair.i}-{pair.j}  tags={sorted(pair.tags)}")

    # =========================================================================
    # STEP 2: BUILD
    # =========================================================================
    print_header("STEP 2: Compile")
    spec = default_build_spec(params.rod_config, params.cable_config)
    model = TensegrityModel(structure, spec, name="planar")

    controller = ConstantTensionController(tension=50.0)
    out_dir = Path(tempfile.mkdtemp(prefix="planar_"))
    com_log = CenterOfMassLogger(out_dir / "com.csv")
    model.attach(controller)
    model.attach(com_log)

    sim = Simulation(World())
    sim.add_model(model)
    print(f"\n  {len(model.rigid_bodies)} rigid bodies, {len(model.actuators)} actuators")

    # =========================================================================
    # STEP 3: SIMULATE
    # =========================================================================
    print_header("STEP 3: Simulate 0.5 s")
    dt = 0.001
    sim.run(500, dt)

    print("\nActuators:")
    print(actuator_summary(model.actuators).to_string(index=False, float_format="%.4f"))

    com = load_log(out_dir / "com.csv", columns=["x", "y", "z"])
    print(f"\nCentre of mass: y {com['y'].iloc[0]:.3f} -> {com['y'].iloc[-1]:.3f}")
    print(f"Log written to {out_dir}")

    sim.reset()
    print_header("DONE")


if __name__ == "__main__":
    main()
