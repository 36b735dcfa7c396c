"""Channel access and collection utilities for AnnData units."""
import numbers
import numpy as np
import pandas as pd
import anndata as ad
from collections.abc import Mapping
from typing import Any, Callable, List, Optional, Tuple, Union

from .errors import ConfigurationError

__all__ = ["is_unit", "is_collection", "collection_units", "resolve_channel",
           "check_layer", "get_channel_values", "apply_to_collection", "append_columns"]


def is_unit(obj: Any) -> bool:
    """True for a single AnnData measurement unit."""
    return isinstance(obj, ad.AnnData)


def is_collection(obj: Any) -> bool:
    """True for a dict, list or tuple whose members are all AnnData units."""
    if isinstance(obj, Mapping):
        members = obj.values()
    elif isinstance(obj, (list, tuple)):
        members = obj
    else:
        return False
    return all(is_unit(m) for m in members)


def collection_units(collection: Union[Mapping, list, tuple]) -> List[ad.AnnData]:
    """Members of a collection, in order."""
    if isinstance(collection, Mapping):
        return list(collection.values())
    return list(collection)


def resolve_channel(adata: ad.AnnData, channel: Union[int, str]) -> Tuple[int, str]:
    """Resolve a channel given by position or by name.

    Parameters
    ----------
    adata : AnnData
        Unit whose ``var_names`` are the channel names.
    channel : int or str
        Channel position (negative positions count from the end) or name.

    Returns
    -------
    tuple
        ``(index, name)`` of the channel.

    Raises
    ------
    ConfigurationError
        If the name is unknown or the position is out of range.
    """
    names = list(adata.var_names)

    if isinstance(channel, str):
        if channel not in names:
            raise ConfigurationError(f"Channel '{channel}' not found. Available channels: {names}")
        return names.index(channel), channel

    if isinstance(channel, numbers.Integral) and not isinstance(channel, bool):
        n_channels = len(names)
        if not -n_channels <= channel < n_channels:
            raise ConfigurationError(
                f"Channel index {channel} out of range for {n_channels} channels"
            )
        index = int(channel) % n_channels
        return index, names[index]

    raise ConfigurationError(
        f"channel must be an integer position or a channel name, got {type(channel).__name__}"
    )


def check_layer(adata: ad.AnnData, layer: Optional[str]) -> None:
    """Raise ConfigurationError if ``layer`` is set but missing from ``adata``."""
    if layer is not None and layer not in adata.layers:
        raise ConfigurationError(
            f"Layer '{layer}' not found. Available layers: {list(adata.layers.keys())}"
        )
    if layer is None and adata.X is None:
        raise ConfigurationError("adata.X is empty. Pass the layer holding the channel values.")


def get_channel_values(adata: ad.AnnData, index: int, layer: Optional[str] = None) -> np.ndarray:
    """Dense float vector of one channel from ``adata.X`` or a layer."""
    check_layer(adata, layer)
    X = adata.layers[layer] if layer is not None else adata.X
    column = X[:, index]
    if hasattr(column, 'toarray'):
        column = column.toarray()
    return np.asarray(column, dtype=float).ravel()


def apply_to_collection(collection: Union[Mapping, list, tuple],
                        fn: Callable[[ad.AnnData], Any]) -> Union[dict, list, tuple]:
    """Apply ``fn`` to every unit independently, keeping keys and order.

    Mappings come back as a dict, lists and tuples as the same type.
    """
    if isinstance(collection, Mapping):
        return {name: fn(unit) for name, unit in collection.items()}
    return type(collection)(fn(unit) for unit in collection)


def append_columns(adata: ad.AnnData, table: pd.DataFrame) -> ad.AnnData:
    """Return a copy of ``adata`` with the columns of ``table`` added to ``obs``.

    Rows of ``table`` must follow ``adata.obs`` order. Existing obs columns
    keep their values, except those sharing a name with ``table`` which are
    replaced.
    """
    if len(table) != adata.n_obs:
        raise ValueError(
            f"Table has {len(table)} rows but adata has {adata.n_obs} events"
        )

    adata = adata.copy()
    for col in table.columns:
        adata.obs[col] = table[col].to_numpy()
    return adata
