"""MedAssess — medical equipment condition assessment from a single photo."""

__version__ = "0.3.0"
