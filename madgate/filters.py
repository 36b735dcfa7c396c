"""Automatic MAD-based gating of multimodal cytometry channels."""
import warnings
import numpy as np
import pandas as pd
import anndata as ad
from typing import Callable, List, Optional, Union

from .errors import InputTypeError
from .gates import GateInterval, validate_gate_config, resolve_gates
from .indicators import default_filter_name, indicator_table
from .io import (is_unit, is_collection, collection_units, resolve_channel, check_layer,
                 get_channel_values, apply_to_collection, append_columns)
from .peaks import Peak, find_peaks

__all__ = ["mad_filter", "filter_gate_summary"]


def _gate_unit(adata: ad.AnnData,
               channel: Union[int, str],
               filter_name: Optional[str],
               n_mads: float,
               n_gates: int,
               mad_side: str,
               adjust: float,
               non_mad_filter: str,
               return_sep_filter: bool,
               return_gate_vals: bool,
               layer: Optional[str],
               peak_finder: Callable[..., List[Peak]],
               verbose: bool):
    """Run the gating pipeline on a single unit."""
    channel_index, channel_name = resolve_channel(adata, channel)
    if filter_name is None:
        filter_name = default_filter_name(channel_name)

    values = get_channel_values(adata, channel_index, layer)
    peaks = peak_finder(values, n_gates, adjust)

    if len(peaks) < n_gates:
        warnings.warn(
            f"Requested {n_gates} gates but only {len(peaks)} peak(s) found in channel "
            f"'{channel_name}'. Consider lowering adjust.",
            UserWarning
        )

    gates = resolve_gates(values, peaks, n_mads, mad_side, non_mad_filter)

    if verbose:
        print(f"MAD filter: channel '{channel_name}', {len(peaks)}/{n_gates} peak(s), "
              f"mad_side={mad_side}, non_mad_filter={non_mad_filter}, n_mads={n_mads}")
        for i, (peak, gate) in enumerate(zip(peaks, gates), start=1):
            print(f"  Gate {i}: peak={peak.location:.3f}, [{gate.low:.3f}, {gate.high:.3f})")

    if return_gate_vals:
        return gates

    table = indicator_table(values, gates, filter_name, index=adata.obs_names)
    if return_sep_filter:
        return table

    adata = append_columns(adata, table)

    n_total = len(values)
    n_events = [int(table[col].sum()) for col in table.columns]

    if 'mad_filter' not in adata.uns:
        adata.uns['mad_filter'] = {}

    adata.uns['mad_filter'][filter_name] = {
        'channel': channel_name,
        'layer': layer,
        'n_mads': float(n_mads),
        'n_gates': int(n_gates),
        'n_peaks_found': len(peaks),
        'mad_side': mad_side,
        'non_mad_filter': non_mad_filter,
        'adjust': adjust,
        'columns': list(table.columns),
        'peaks': [float(p.location) for p in peaks],
        'low_deflections': [float(p.low_deflection) for p in peaks],
        'high_deflections': [float(p.high_deflection) for p in peaks],
        'gates': [[gate.low, gate.high] for gate in gates],
        'n_events': n_events,
        'n_total': int(n_total),
    }

    if verbose:
        for col, n in zip(table.columns, n_events):
            pct = 100 * n / n_total if n_total else 0.0
            print(f"  [+] Added gate column: adata.obs['{col}'] ({n}/{n_total} events, {pct:.1f}%)")
        print(f"  [+] Metadata saved: adata.uns['mad_filter']['{filter_name}']")

    return adata


def mad_filter(data,
               channel: Union[int, str] = 0,
               n_mads: float = 2.0,
               filter_name: Optional[str] = None,
               n_gates: int = 1,
               mad_side: str = 'both',
               adjust: float = 2.0,
               non_mad_filter: str = 'deflection',
               return_sep_filter: bool = False,
               return_gate_vals: bool = False,
               layer: Optional[str] = None,
               peak_finder: Optional[Callable[..., List[Peak]]] = None,
               verbose: bool = True):
    """Create automatic, MAD-based gates for an n-peaked channel.

    For each density peak of the channel, the spread is estimated separately
    on each side with a mirror-folded MAD, so the gate can be asymmetric
    even when both sides are MAD-bounded. A side without a MAD is bounded by
    the peak's deflection point or by the channel extreme.

    Parameters
    ----------
    data : AnnData, dict, list or tuple
        A single unit, or a collection of units (dict of name -> AnnData,
        list or tuple of AnnData). Every unit of a collection is gated
        independently.
    channel : int or str, default 0
        Channel to gate, as a position in ``var_names`` or a channel name.
    n_mads : float, default 2.0
        Number of MADs included on each MAD-bounded side of a peak.
    filter_name : str, optional
        Base name of the gate columns. Default: ``'{channel}_auto_filter'``.
    n_gates : int, default 1
        Number of peaks, and hence gates, to produce.
    mad_side : {'both', 'low', 'high', 'none'}, default 'both'
        Side(s) of each peak bounded by the MAD.
    adjust : float, default 2.0
        Density smoothing passed to the peak finder. The higher the value,
        the lower the sensitivity to small aberrations in the density.
    non_mad_filter : {'deflection', 'none'}, default 'deflection'
        Bound on the non-MAD side: the deflection point marking the next
        peak, or the channel extreme (all events on that side included).
        Ignored when ``mad_side='both'``.
    return_sep_filter : bool, default False
        Return the indicator table instead of an augmented unit.
        Incompatible with ``return_gate_vals``.
    return_gate_vals : bool, default False
        Return only the gate intervals. Incompatible with
        ``return_sep_filter``.
    layer : str, optional
        Layer holding the channel values. None for ``adata.X``.
    peak_finder : callable, optional
        ``peak_finder(values, n_peaks, adjust) -> list of Peak``, peaks in
        ascending order. Default: :func:`madgate.peaks.find_peaks`.
    verbose : bool, default True
        Print progress messages.

    Returns
    -------
    AnnData, DataFrame or list of GateInterval
        Per unit, depending on the output flags:

        - default: copy of the unit with 0/1 gate columns in ``obs`` and
          metadata in ``adata.uns['mad_filter'][filter_name]``
        - ``return_sep_filter``: DataFrame of 0/1 gate columns
        - ``return_gate_vals``: list of ``GateInterval(low, high)``

        For a collection, the same container type holding one result per
        unit.

    Raises
    ------
    ConfigurationError
        If the configuration is invalid or the channel or layer cannot be
        resolved. Raised before any peak is searched.
    InputTypeError
        If ``data`` is neither a unit nor a collection of units.

    Examples
    --------
    >>> adata = mad_filter(adata, channel='CD3', n_gates=2)
    >>> gates = mad_filter(adata, channel='CD4', mad_side='low', return_gate_vals=True)
    >>> tables = mad_filter({'s1': a1, 's2': a2}, channel=3, return_sep_filter=True)
    """
    validate_gate_config(mad_side, non_mad_filter, n_gates, n_mads,
                         return_sep_filter, return_gate_vals)

    if is_unit(data):
        units = [data]
    elif is_collection(data):
        units = collection_units(data)
    else:
        raise InputTypeError(
            "data must be an AnnData object or a dict, list or tuple of AnnData objects, "
            f"got {type(data).__name__}"
        )

    for unit in units:
        resolve_channel(unit, channel)
        check_layer(unit, layer)

    if peak_finder is None:
        peak_finder = find_peaks

    def gate_unit(adata):
        return _gate_unit(adata, channel, filter_name, n_mads, n_gates, mad_side, adjust,
                          non_mad_filter, return_sep_filter, return_gate_vals, layer,
                          peak_finder, verbose)

    if is_unit(data):
        return gate_unit(data)
    return apply_to_collection(data, gate_unit)


def filter_gate_summary(adata: ad.AnnData, filter_name: Optional[str] = None) -> pd.DataFrame:
    """Summarise the gates stored by :func:`mad_filter` on a unit.

    Parameters
    ----------
    adata : AnnData
        Unit returned by :func:`mad_filter`.
    filter_name : str, optional
        Filter to summarise. May be omitted when a single filter is stored.

    Returns
    -------
    DataFrame
        One row per gate: column, peak, low, high, n_events, fraction.
    """
    results = adata.uns.get('mad_filter', {})
    if not results:
        raise ValueError("No MAD filter results found. Run mad_filter first.")

    if filter_name is None:
        if len(results) > 1:
            raise ValueError(
                f"Several filters stored, pass filter_name. Available: {list(results.keys())}"
            )
        filter_name = next(iter(results))
    elif filter_name not in results:
        raise ValueError(f"Filter '{filter_name}' not found. Available: {list(results.keys())}")

    meta = results[filter_name]
    gates = [GateInterval(float(low), float(high)) for low, high in meta['gates']]
    n_total = meta['n_total']

    return pd.DataFrame({
        'column': list(meta['columns']),
        'peak': np.asarray(meta['peaks'], dtype=float),
        'low': [g.low for g in gates],
        'high': [g.high for g in gates],
        'n_events': np.asarray(meta['n_events'], dtype=int),
        'fraction': np.asarray(meta['n_events'], dtype=float) / n_total if n_total else 0.0,
    })
