"""Route group exports."""

from . import blocks, health, routes

__all__ = ["blocks", "routes", "health"]
