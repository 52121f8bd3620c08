"""nutrilog - local meal log, calorie goal and nutrition aggregation."""

__version__ = "1.0.0"
