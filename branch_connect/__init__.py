"""Branch Connect: branch visit reporting backend."""

__version__ = "0.1.0"
