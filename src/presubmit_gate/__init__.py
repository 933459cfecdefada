"""presubmit-gate: decide which presubmit jobs a trigger comment runs."""

__version__ = "0.1.0"
