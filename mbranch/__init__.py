"""Create maintenance branches for previously released versions."""

__version__ = "0.1.0"
