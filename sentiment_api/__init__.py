"""Country news sentiment analysis service."""

__version__ = "0.1.0"
