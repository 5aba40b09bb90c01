"""Framing target computation."""

from camframe.framing.aggregator import (
    BoundsAggregator,
    EmptyInputError,
    compute_framing_target,
    framing_offset,
)

__all__ = ["BoundsAggregator", "EmptyInputError", "compute_framing_target", "framing_offset"]
