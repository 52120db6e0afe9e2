"""Gantt-style planning of garden tasks and crops stored in SQLite."""

__version__ = "0.1.0"
__all__ = ["calendar", "positions", "tasks", "planner", "cultures", "planning"]