# mini_tensegrity/post.py
"""Reading logger output back for analysis."""

from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from .kernel.cable import Cable


def load_log(path: Union[str, Path], columns: Optional[List[str]] = None) -> pd.DataFrame:
    """
    Load a comma-separated log written by one of the loggers.

    Parameters:
    -----------
    path : str or Path
        Log file
    columns : list of str, optional
        Column names; must match the number of values per record

    Returns:
    --------
    pd.DataFrame
        One row per record
    """
    df = pd.read_csv(path, header=None, dtype=float)
    if columns is not None:
        if len(columns) != df.shape[1]:
            raise ValueError(f"Got {len(columns)} column names for {df.shape[1]} columns in {path}")
        df.columns = list(columns)
    return df


def cable_history_frame(cable: Cable) -> pd.DataFrame:
    """History of a cable built with CableConfig(history=True)."""
    if cable.history is None:
        raise ValueError(f"{cable.name} does not record history")
    return pd.DataFrame(cable.history.as_arrays())


def actuator_summary(actuators: List[Cable]) -> pd.DataFrame:
    """Current state of every actuator, one row each."""
    rows = []
    for k, cable in enumerate(actuators):
        a, b = cable.point_indices
        rows.append({
            'index': k,
            'pair_id': cable.pair_id,
            'point_a': a,
            'point_b': b,
            'length': cable.length,
            'rest_length': cable.rest_length,
            'tension': cable.tension,
        })
    return pd.DataFrame(rows)
