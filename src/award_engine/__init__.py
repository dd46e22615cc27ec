"""Award interpretation and statutory calculation engine."""

__version__ = "0.1.0"
