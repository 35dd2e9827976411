"""modules/planning — My Day plan generation."""

from modules.planning.day_planner import DayPlanner, generate

__all__ = ["DayPlanner", "generate"]
