"""Pure analysis package for the carts-and-mass experiment.

This package contains deterministic, testable computations that operate on
in-memory records and return DTOs. It must not import Django or perform any
I/O.
"""

from .engine import derive_views

__all__ = ["derive_views"]
