"""CI pipeline run metrics: status normalization and metrics derivation."""

__version__ = "1.2.0"
