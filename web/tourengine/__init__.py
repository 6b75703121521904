"""Tour scheduling and pricing resolution engine."""

__version__ = "1.0.0"
