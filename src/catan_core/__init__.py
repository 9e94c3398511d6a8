"""Rules engine for the Settlers of Catan board game."""

__version__ = "1.0.0"
