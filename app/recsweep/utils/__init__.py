"""Utility helpers shared across recsweep."""
