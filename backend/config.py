"""
config.py
---------
Central configuration for the My Day planner.
Everything is read from environment variables once, at import time.

The planning zone and walking model feed directly into plan output, so the
defaults below are the values the shared plan vectors were produced with.
Changing them changes plans.
"""

import os
from pathlib import Path

# Load .env from the backend directory (if it exists) so env vars in that file
# are picked up by os.getenv() below.  Won't override vars already set in the shell.
from dotenv import load_dotenv

_env_path = Path(__file__).parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# ── Planning zone ─────────────────────────────────────────────────────────────
# Meal windows, time-of-day buckets and opening hours are all evaluated here.
PLANNING_TIMEZONE: str = os.getenv("PLANNING_TIMEZONE", "Africa/Casablanca")

# ── Walking model (GeoTool) ───────────────────────────────────────────────────
WALK_SPEED_MPS: float           = float(os.getenv("WALK_SPEED_MPS", "1.25"))   # 4.5 km/h
OLD_CITY_WALK_MULTIPLIER: float = float(os.getenv("OLD_CITY_WALK_MULTIPLIER", "0.7"))
WALK_NAV_BUFFER: float          = float(os.getenv("WALK_NAV_BUFFER", "1.1"))   # +10 % for navigation/stops

# ── Units ─────────────────────────────────────────────────────────────────────
CURRENCY_UNIT: str = os.getenv("CURRENCY_UNIT", "MAD")

# ── Observability ─────────────────────────────────────────────────────────────
# JSONL event logs land in LOGS_DIR/<session_id>.jsonl
LOGS_DIR: Path = Path(os.getenv("LOGS_DIR", str(Path(__file__).resolve().parent / "logs")))
PLAN_EVENT_LOG_ENABLED: bool = _env_bool("PLAN_EVENT_LOG_ENABLED", "false")
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# ── API ───────────────────────────────────────────────────────────────────────
API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))
