"""Gate membership indicators and their column naming."""
import numpy as np
import pandas as pd
from typing import List, Optional, Sequence

from .gates import GateInterval

__all__ = ["default_filter_name", "gate_column_names", "gate_indicator", "indicator_table"]


def default_filter_name(channel_name: str) -> str:
    """Filter name used when none is given, e.g. ``'CD3_auto_filter'``."""
    return f"{channel_name}_auto_filter"


def gate_column_names(filter_name: str, n_gates: int) -> List[str]:
    """Column names for ``n_gates`` gates.

    A single gate keeps ``filter_name`` as is; several gates are suffixed
    with their 1-based index (``filter_name_1``, ``filter_name_2``, ...).
    """
    if n_gates == 1:
        return [filter_name]
    return [f"{filter_name}_{i}" for i in range(1, n_gates + 1)]


def gate_indicator(values: np.ndarray, gate: GateInterval) -> np.ndarray:
    """0/1 vector marking values inside ``[gate.low, gate.high)``."""
    x = np.asarray(values, dtype=float)
    return ((x >= gate.low) & (x < gate.high)).astype(int)


def indicator_table(values: np.ndarray,
                    gates: Sequence[GateInterval],
                    filter_name: str,
                    index: Optional[Sequence] = None) -> pd.DataFrame:
    """Build the indicator table of a channel, one column per gate.

    Parameters
    ----------
    values : array-like
        Channel values.
    gates : sequence of GateInterval
        Gates ordered as their peaks.
    filter_name : str
        Base name of the columns.
    index : sequence, optional
        Row labels, typically ``adata.obs_names``.

    Returns
    -------
    DataFrame
        Integer 0/1 columns, same number of rows as ``values``.
    """
    columns = gate_column_names(filter_name, len(gates))
    data = {col: gate_indicator(values, gate) for col, gate in zip(columns, gates)}
    return pd.DataFrame(data, index=index, columns=columns)
