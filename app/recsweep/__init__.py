"""recsweep - Free-space guard for surveillance recording volumes."""

__version__ = "0.3.0"
