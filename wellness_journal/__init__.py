"""Wellness Journal: local entry store and derived analytics for a daily habit journal."""

__version__ = "0.1.0"
