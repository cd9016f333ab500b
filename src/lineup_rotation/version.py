"""Version information for the lineup rotation engine."""

__version__ = "0.3.0"
