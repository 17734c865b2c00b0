"""Speed-based active steering controller for four-wheel vehicles."""

__version__ = "1.0.0"
