"""Domain enumerations shared by schemas and services."""

from rams.models.enums import Hazard, PPEItem, Regulation, Severity

__all__ = ["Hazard", "PPEItem", "Regulation", "Severity"]
