"""Route group exports."""

from . import classification, health, routing, sorting, workstation

__all__ = ["routing", "workstation", "sorting", "classification", "health"]
