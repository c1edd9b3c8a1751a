"""SkyKit: kit allocation and purchasing engine for a round-based airline simulation."""

__version__ = "1.0.0"
