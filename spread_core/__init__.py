"""Spread resolution and dependency-graph installation engine."""

__version__ = "0.1.0"
