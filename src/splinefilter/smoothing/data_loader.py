"""
Loading of sample data for smoothing.

This module reads (x, y) samples from CSV files and prepares them as float
arrays for fitting.
"""

import logging
from pathlib import Path
from typing import Tuple

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def load_samples_csv(csv_path: Path, x_column: str = "x", y_column: str = "y") -> Tuple[np.ndarray, np.ndarray]:
    """
    Load sample abscissas and values from a CSV file.

    Rows where either column is missing or non-finite are dropped.

    Parameters
    ----------
    csv_path : Path
        Path to the CSV file. Lines starting with '#' are ignored.
    x_column : str
        Column holding the abscissas.
    y_column : str
        Column holding the values.

    Returns
    -------
    x : np.ndarray
        Abscissas, shape (NX,).
    y : np.ndarray
        Values, shape (NX,).

    Raises
    ------
    FileNotFoundError
        If CSV file does not exist.
    ValueError
        If required columns are missing or no valid rows remain.
    """
    csv_path = Path(csv_path)

    if not csv_path.exists():
        raise FileNotFoundError(f"Sample CSV not found: {csv_path}")

    logger.info(f"Loading samples from {csv_path}")

    df = pd.read_csv(csv_path, comment="#")

    required_columns = [x_column, y_column]
    missing_columns = [col for col in required_columns if col not in df.columns]
    if missing_columns:
        raise ValueError(
            f"Missing required columns in {csv_path}: {missing_columns}. Found columns: {list(df.columns)}"
        )

    x = pd.to_numeric(df[x_column], errors="coerce").to_numpy(dtype=np.float64)
    y = pd.to_numeric(df[y_column], errors="coerce").to_numpy(dtype=np.float64)

    valid = np.isfinite(x) & np.isfinite(y)
    n_rejected = int(np.sum(~valid))
    if n_rejected > 0:
        logger.warning(f"Dropped {n_rejected} of {len(df)} rows with missing or non-finite values")

    if not np.any(valid):
        raise ValueError(f"No valid samples in {csv_path}")

    logger.info(f"Loaded {int(np.sum(valid))} samples")

    return x[valid], y[valid]
