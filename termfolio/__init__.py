"""termfolio - a portfolio you explore from a terminal."""

__version__ = "0.1.0"
