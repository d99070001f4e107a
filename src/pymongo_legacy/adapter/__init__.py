"""Dual calling convention adapter layer."""

from .augmentor import augment
from .base import AdapterBase
from .dual_mode import (
    CallingConvention,
    PendingOperation,
    dual_mode,
    dual_mode_function,
    pending_operations,
    positional_arity,
    positional_parameters,
)
from .rewrap import AdapterRegistry, rewrap

__all__ = [
    # Adapter instances
    "AdapterBase",
    "AdapterRegistry",
    # Invocation
    "CallingConvention",
    "PendingOperation",
    "dual_mode",
    "dual_mode_function",
    "pending_operations",
    "positional_arity",
    "positional_parameters",
    # Setup and results
    "augment",
    "rewrap",
]
