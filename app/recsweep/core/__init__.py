"""Evaluation engine: selection, consolidation, scheduling and triggering."""
