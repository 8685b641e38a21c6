"""Kernel value types."""

from planecrazy.kernel.types.result import Err, Ok, Result

__all__ = ["Err", "Ok", "Result"]
