"""Peak-anchored, mirror-folded median absolute deviation."""
import warnings
import numpy as np
from typing import Optional, Tuple
from scipy.stats import median_abs_deviation

from .errors import DegenerateSpreadWarning
from .peaks import Peak

__all__ = ["half_peak_values", "folded_mad", "mad_bounds"]


def half_peak_values(values: np.ndarray, peak: Peak, side: str) -> np.ndarray:
    """Return the channel values on one side of a peak.

    The low side spans ``[low_deflection, location)`` and the high side
    spans ``[location, high_deflection)``.
    """
    x = np.asarray(values, dtype=float)
    if side == 'low':
        mask = (x >= peak.low_deflection) & (x < peak.location)
    elif side == 'high':
        mask = (x >= peak.location) & (x < peak.high_deflection)
    else:
        raise ValueError(f"side must be 'low' or 'high', got {side!r}")
    return x[mask]


def folded_mad(half_peak: np.ndarray, location: float) -> float:
    """MAD of a half-peak sample mirrored around the peak location.

    The sample is centered on ``location`` and concatenated with its
    negation, so the classic MAD applies to a sample symmetric around zero
    while only reflecting the tail shape of one side. Scaled to be
    consistent with the standard deviation of a normal distribution
    (constant 1.4826).

    Parameters
    ----------
    half_peak : array-like
        Values on one side of the peak.
    location : float
        Peak location.

    Returns
    -------
    float
        Non-negative spread estimate. Samples with fewer than two values
        are degenerate and return 0.0.
    """
    centered = np.asarray(half_peak, dtype=float).ravel() - location
    if centered.size < 2:
        return 0.0
    folded = np.concatenate([centered, -centered])
    return float(median_abs_deviation(folded, scale='normal'))


def _side_mad(values: np.ndarray, peak: Peak, side: str) -> float:
    mad = folded_mad(half_peak_values(values, peak, side), peak.location)
    if mad == 0:
        warnings.warn(
            f"Folded MAD is zero on the {side} side of the peak at {peak.location:.4g}; "
            f"the gate collapses onto the peak location on that side.",
            DegenerateSpreadWarning,
            stacklevel=3
        )
    return mad


def mad_bounds(values: np.ndarray,
               peak: Peak,
               n_mads: float = 2.0,
               mad_side: str = 'both') -> Tuple[Optional[float], Optional[float]]:
    """Compute the MAD-derived gate bounds of a peak.

    Parameters
    ----------
    values : array-like
        Channel values.
    peak : Peak
        Peak with its deflection points.
    n_mads : float, default 2.0
        Number of MADs between the peak location and each bound.
    mad_side : {'both', 'low', 'high', 'none'}, default 'both'
        Sides on which a MAD is computed.

    Returns
    -------
    tuple
        ``(low_bound, high_bound)``; a side without a MAD is None.
    """
    low_bound = high_bound = None
    if mad_side in ('both', 'low'):
        low_bound = peak.location - _side_mad(values, peak, 'low') * n_mads
    if mad_side in ('both', 'high'):
        high_bound = peak.location + _side_mad(values, peak, 'high') * n_mads
    return low_bound, high_bound
