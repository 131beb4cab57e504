"""Version information for the Airship SDK."""

__version__ = "0.1.0"
