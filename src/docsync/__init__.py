"""Build-time documentation sync for the delivery-process website."""

__version__ = "0.1.0"
