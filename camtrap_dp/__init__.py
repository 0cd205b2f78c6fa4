"""
camtrap_dp – Camera Trap Data Package (Camtrap DP 1.0) tables in Python.

Reads and writes deployments.csv, media.csv and observations.csv as typed,
validated records.
"""

__version__ = "0.1.0"
