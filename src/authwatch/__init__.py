"""authwatch — SSH session activity log built from the authentication log."""

__version__ = "0.1.0"
