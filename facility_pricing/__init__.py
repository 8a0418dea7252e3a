"""Facility pricing engine for commercial cleaning services."""

__version__ = "0.1.0"
