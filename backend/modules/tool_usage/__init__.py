"""modules/tool_usage — geo and opening-hours utilities used by the planner."""
