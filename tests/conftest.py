"""Shared fixtures for madgate tests."""
import numpy as np
import pandas as pd
import anndata as ad
import pytest

from madgate.peaks import Peak

# Consistency constant of the normal-scaled MAD
NORMAL_SCALE = 1.482602218505602

BIMODAL_VALUES = np.array([1, 1, 1, 2, 2, 3, 8, 9, 9, 10, 10, 11], dtype=float)
BIMODAL_PEAKS = [Peak(1.5, 1.0, 5.5), Peak(9.5, 5.5, 11.0)]


def make_unit(columns, names=None):
    """Build an AnnData unit from equally long channel vectors."""
    X = np.column_stack([np.asarray(c, dtype=float) for c in columns])
    names = names or [f"ch_{i+1}" for i in range(X.shape[1])]
    return ad.AnnData(
        X=X,
        obs=pd.DataFrame({'sample': 'a'}, index=[f"cell_{i}" for i in range(X.shape[0])]),
        var=pd.DataFrame(index=names)
    )


class StubPeakFinder:
    """Peak finder returning fixed peaks and recording its calls."""

    def __init__(self, peaks):
        self.peaks = list(peaks)
        self.calls = []

    def __call__(self, values, n_peaks, adjust):
        self.calls.append((np.array(values), n_peaks, adjust))
        return self.peaks[:n_peaks]


@pytest.fixture
def bimodal_values():
    return BIMODAL_VALUES.copy()


@pytest.fixture
def bimodal_unit():
    return make_unit([BIMODAL_VALUES, BIMODAL_VALUES[::-1] * 10], names=['CD3', 'CD19'])


@pytest.fixture
def stub_finder():
    return StubPeakFinder(BIMODAL_PEAKS)
