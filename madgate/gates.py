"""Gate configuration checks and gate boundary resolution."""
import numbers
import numpy as np
from typing import List, NamedTuple, Optional, Sequence

from .errors import ConfigurationError
from .mad import mad_bounds
from .peaks import Peak

__all__ = ["MAD_SIDES", "NON_MAD_FILTERS", "GateInterval",
           "validate_gate_config", "resolve_gate", "resolve_gates"]

MAD_SIDES = ('both', 'low', 'high', 'none')
NON_MAD_FILTERS = ('deflection', 'none')

# (mad_side, non_mad_filter) -> (low bound source, high bound source)
_BOUNDARY_RULES = {
    ('both', 'deflection'): ('mad', 'mad'),
    ('both', 'none'): ('mad', 'mad'),
    ('low', 'deflection'): ('mad', 'deflection'),
    ('low', 'none'): ('mad', 'extreme'),
    ('high', 'deflection'): ('deflection', 'mad'),
    ('high', 'none'): ('extreme', 'mad'),
    ('none', 'deflection'): ('deflection', 'deflection'),
}


class GateInterval(NamedTuple):
    """Half-open gate ``[low, high)`` attributed to one peak."""
    low: float
    high: float


def validate_gate_config(mad_side: str = 'both',
                         non_mad_filter: str = 'deflection',
                         n_gates: int = 1,
                         n_mads: float = 2.0,
                         return_sep_filter: bool = False,
                         return_gate_vals: bool = False) -> None:
    """Check a gating configuration before any data is touched.

    Raises
    ------
    ConfigurationError
        If an option is unknown or out of range, if ``mad_side='none'`` is
        combined with ``non_mad_filter='none'``, if several gates are
        requested while the non-MAD side is unbounded, or if both output
        flags are set.
    """
    if return_sep_filter and return_gate_vals:
        raise ConfigurationError(
            "Either the gate values or the result of applying them is returned, not both: "
            "return_sep_filter and return_gate_vals are mutually exclusive"
        )
    if mad_side not in MAD_SIDES:
        raise ConfigurationError(f"mad_side must be one of {MAD_SIDES}, got {mad_side!r}")
    if non_mad_filter not in NON_MAD_FILTERS:
        raise ConfigurationError(f"non_mad_filter must be one of {NON_MAD_FILTERS}, got {non_mad_filter!r}")
    if isinstance(n_gates, bool) or not isinstance(n_gates, numbers.Integral) or n_gates < 1:
        raise ConfigurationError(f"n_gates must be a positive integer, got {n_gates!r}")
    if (isinstance(n_mads, bool) or not isinstance(n_mads, numbers.Real)
            or not np.isfinite(n_mads) or n_mads <= 0):
        raise ConfigurationError(f"n_mads must be a positive number, got {n_mads!r}")

    if mad_side == 'none' and non_mad_filter == 'none':
        raise ConfigurationError(
            "With mad_side='none' and non_mad_filter='none' no filtering would be achieved"
        )
    if n_gates > 1 and mad_side != 'both' and non_mad_filter == 'none':
        raise ConfigurationError(
            f"n_gates={n_gates} with mad_side={mad_side!r} and non_mad_filter='none' "
            "leaves the non-MAD side unbounded and would lead to overlapping gates"
        )


def resolve_gate(peak: Peak,
                 low_mad: Optional[float],
                 high_mad: Optional[float],
                 channel_min: float,
                 channel_max: float,
                 mad_side: str = 'both',
                 non_mad_filter: str = 'deflection') -> GateInterval:
    """Pick the final gate bounds of one peak.

    ``low_mad`` and ``high_mad`` are the MAD-derived bounds; the non-MAD side
    falls back to the peak's deflection point or, with
    ``non_mad_filter='none'``, to the channel extreme. With
    ``mad_side='both'`` the non-MAD filter is ignored.
    """
    try:
        low_source, high_source = _BOUNDARY_RULES[(mad_side, non_mad_filter)]
    except KeyError:
        raise ConfigurationError(
            f"No gate can be built for mad_side={mad_side!r}, non_mad_filter={non_mad_filter!r}"
        ) from None

    if (low_source == 'mad' and low_mad is None) or (high_source == 'mad' and high_mad is None):
        raise ValueError(f"mad_side={mad_side!r} requires the matching MAD bound")

    low = {'mad': low_mad, 'deflection': peak.low_deflection, 'extreme': channel_min}[low_source]
    high = {'mad': high_mad, 'deflection': peak.high_deflection, 'extreme': channel_max}[high_source]
    return GateInterval(float(low), float(high))


def resolve_gates(values: np.ndarray,
                  peaks: Sequence[Peak],
                  n_mads: float = 2.0,
                  mad_side: str = 'both',
                  non_mad_filter: str = 'deflection') -> List[GateInterval]:
    """Resolve one gate per peak of a channel."""
    x = np.asarray(values, dtype=float)
    channel_min, channel_max = float(np.nanmin(x)), float(np.nanmax(x))

    gates = []
    for peak in peaks:
        low_mad, high_mad = mad_bounds(x, peak, n_mads, mad_side)
        gates.append(resolve_gate(peak, low_mad, high_mad, channel_min, channel_max,
                                  mad_side, non_mad_filter))
    return gates
