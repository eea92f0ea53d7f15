"""Pipeline exports."""

from .runner import EvoPool, EvoPoolResult

__all__ = ["EvoPool", "EvoPoolResult"]
