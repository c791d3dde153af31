"""5/3/1 strength training planner."""

__version__ = "0.1.0"
