import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./salonboard.db")

# Booking board layout
# DAY_END_HOUR may exceed 24 for boards that run past midnight (26 = 02:00)
DAY_START_HOUR = int(os.getenv("DAY_START_HOUR", "10"))
DAY_END_HOUR = int(os.getenv("DAY_END_HOUR", "26"))
SLOT_INTERVAL_MINUTES = int(os.getenv("SLOT_INTERVAL_MINUTES", "30"))

# Wall-clock hour before which a moment still belongs to the previous work day
WORKDAY_CUTOFF_HOUR = int(os.getenv("WORKDAY_CUTOFF_HOUR", "2"))

# Frontend base URL, used for the default CORS origin
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    f"{FRONTEND_URL},http://localhost:3000",
).split(",")


def get_grid_config():
    """Grid configuration for the booking board. Raises GridConfigError if malformed."""
    from .domain.scheduling.grid import GridConfig

    return GridConfig(
        day_start_hour=DAY_START_HOUR,
        day_end_hour=DAY_END_HOUR,
        interval_minutes=SLOT_INTERVAL_MINUTES,
    )
