"""Flood-control project report generator.

Reads a DPWH-style project CSV, normalizes rows into typed records and
writes the regional efficiency, contractor reliability and type-of-work
trend reports plus a JSON summary.
"""

__version__ = "0.1.0"
