# path: cyclocoach/config.py

"""CycloCoach configuration — loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# Branding used in GPX metadata and the creator attribute
BRAND_NAME = os.environ.get("CYCLOCOACH_BRAND", "CycloCoach")

# Download filenames: <prefix>-<practice>-<km>km.gpx
GPX_FILE_PREFIX = os.environ.get("GPX_FILE_PREFIX", "cyclocoach")

# Path the chat summary links to; must match the gpx router mount point
GPX_DOWNLOAD_PATH = os.environ.get("GPX_DOWNLOAD_PATH", "/api/gpx")

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Server
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))
