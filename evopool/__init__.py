"""Top-level package exposing EvoPool SDK entrypoints."""

from .pipelines import EvoPool, EvoPoolResult

__all__ = ["EvoPool", "EvoPoolResult"]
