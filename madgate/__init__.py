"""
madgate - automatic MAD-based gating of multimodal cytometry channels.

Peak-anchored, asymmetric median absolute deviation gates that turn a
continuous channel into one 0/1 membership indicator per density peak.

Submodules
----------
filters
    Gating entry point (``mad_filter``) for single units and collections.
peaks
    Density peak and deflection point identification.
mad
    Mirror-folded, per-side MAD around a peak.
gates
    Configuration checks and gate boundary resolution.
indicators
    Indicator vectors, tables and column naming.
io
    Channel resolution and AnnData collection utilities.
simulate
    Synthetic data generation.

Gate Boundaries
---------------
mad_side='both'
    Both bounds at ``n_mads`` folded MADs from the peak.
mad_side='low' / 'high'
    One MAD bound; the other side ends at the deflection point
    (``non_mad_filter='deflection'``) or the channel extreme
    (``non_mad_filter='none'``).
mad_side='none'
    Gate spans the deflection points of the peak.
"""
from importlib import metadata
from . import io, peaks, mad, gates, indicators, filters, simulate
from .errors import ConfigurationError, InputTypeError, DegenerateSpreadWarning
from .filters import mad_filter, filter_gate_summary

try:
    __version__ = metadata.version(__name__)
except metadata.PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "io", "peaks", "mad", "gates", "indicators", "filters", "simulate",
    "mad_filter", "filter_gate_summary",
    "ConfigurationError", "InputTypeError", "DegenerateSpreadWarning",
    "__version__",
]
