"""Concurrent tree relocation and bottom-up pruning."""

__version__ = "0.1.0"
