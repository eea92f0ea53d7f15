"""
Helpers for loading labeled datasets used by dataset-mode evaluation.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional, Tuple

import numpy as np
import pandas as pd

from evopool.exceptions import EvoPoolConfigError


def load_dataframe(path: Path, **read_kwargs: Any) -> pd.DataFrame:
    """
    Load a dataset into a pandas DataFrame supporting CSV and JSON inputs.

    Parameters
    ----------
    path : Path
        Location of the dataset file.
    read_kwargs : dict
        Optional keyword arguments forwarded to the pandas reader.
    """

    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path, **read_kwargs)
    if suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(data, dict) and {"inputs", "targets"} <= set(data):
            frame = pd.DataFrame(data["inputs"])
            frame.columns = [f"x{i}" for i in range(frame.shape[1])]
            frame["target"] = data["targets"]
            return frame
        if isinstance(data, dict):
            data = data.get("data", data)
        return pd.DataFrame(data)
    raise ValueError(f"Unsupported dataset format for file: {path}")


def split_features(frame: pd.DataFrame, target_column: Optional[str] = None) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(inputs, targets)``; the target defaults to the last column."""

    if frame.shape[1] < 2:
        raise EvoPoolConfigError(
            "A dataset needs at least one input column and a target column.",
            context={"columns": list(frame.columns)},
        )
    target = target_column or frame.columns[-1]
    if target not in frame.columns:
        raise EvoPoolConfigError(
            f"Target column '{target}' not found in dataset.",
            context={"columns": list(frame.columns)},
        )
    inputs = frame.drop(columns=[target]).to_numpy(dtype=np.float64)
    targets = frame[target].to_numpy(dtype=np.float64)
    return inputs, targets


def load_dataset(path: Path, target_column: Optional[str] = None) -> Tuple[np.ndarray, np.ndarray]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset not found: {path}")
    return split_features(load_dataframe(path), target_column)
