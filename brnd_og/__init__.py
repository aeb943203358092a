"""BRND Open Graph image service."""

__version__ = "1.0.0"
