"""Exception and warning types raised by madgate."""

__all__ = ["ConfigurationError", "InputTypeError", "DegenerateSpreadWarning"]


class ConfigurationError(ValueError):
    """Invalid or contradictory gating configuration."""


class InputTypeError(TypeError):
    """Input is neither an AnnData unit nor a collection of AnnData units."""


class DegenerateSpreadWarning(UserWarning):
    """A folded MAD evaluated to zero, collapsing one side of a gate onto its peak."""
