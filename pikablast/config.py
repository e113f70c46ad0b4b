"""
Configuration module for the Pika-Blast backend.

Centralizes the intensity distribution, server settings
and log file locations.
"""

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Intensity distribution – order matters, weights must sum to 1.0
# ---------------------------------------------------------------------------
INTENSITY_WEIGHTS: list[tuple[str, float]] = [
    ("low", 0.4),
    ("medium", 0.3),
    ("high", 0.2),
    ("extreme", 0.1),
]

WEIGHT_TOLERANCE: float = 1e-9

# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "3000"))
APP_ENV: str = os.getenv("APP_ENV", "development")

# Browser frontend, served from "/" when the directory exists.
# Relative paths resolve against the working directory.
STATIC_DIR: Path = Path(os.getenv("PIKABLAST_STATIC_DIR", "public"))

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_DIR: Path = Path(os.getenv("PIKABLAST_LOG_DIR", "logs"))
LOG_TIMEZONE: str = "America/Los_Angeles"
