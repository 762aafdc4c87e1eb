"""
JSON persistence for paths and ray returns.
Arrays are written as nested lists of rows; there is no schema header.
"""
import json
import os

import numpy as np


def to_serializable(data):
    """Recursively turn numpy arrays / tuples into JSON-friendly lists."""
    if isinstance(data, np.ndarray):
        return data.tolist()
    if isinstance(data, (list, tuple)):
        return [to_serializable(d) for d in data]
    if isinstance(data, np.generic):
        return data.item()
    return data


def path_to_array(path) -> np.ndarray:
    """(len(path), 2) table of x, y per waypoint."""
    return np.asarray(path, dtype=float).reshape(-1, 2)


def write_json(filename: str, data):
    """Write data to filename; OSError propagates to the caller."""
    directory = os.path.dirname(filename)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filename, "w") as f:
        json.dump(to_serializable(data), f)


def read_json(filename: str):
    with open(filename, "r") as f:
        return json.load(f)
