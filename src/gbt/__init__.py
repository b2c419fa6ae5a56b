"""Interactive terminal browser for local git branches."""

__version__ = "0.3.0"
