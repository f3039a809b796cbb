"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    BUGS_DATA_FILE             — Primary bug document (default: bugs-data.json)
    TEMPLATE_FILE              — Output path of the `template` command
    SCREENSHOTS_DIR            — Directory served under /screenshots by the dashboard
    DASHBOARD_HOST             — Bind host for the dashboard server
    DASHBOARD_PORT             — Bind port for the dashboard server
    DASHBOARD_DATA_URL         — URL the dashboard refresher fetches the document from
    DASHBOARD_REFRESH_SECONDS  — Seconds between dashboard refreshes (default: 30)
    DASHBOARD_FETCH_TIMEOUT    — httpx timeout for one refresh fetch (default: 10)
    LOG_LEVEL                  — Root log level name (default: INFO)
    LOG_DIR                    — Daily log file directory, empty to disable (default: logs)

Paths are relative to the process working directory, matching how the
document is shipped next to the dashboard assets.
"""
import os
from dotenv import load_dotenv

load_dotenv()

BUGS_DATA_FILE = os.getenv("BUGS_DATA_FILE", "bugs-data.json")
TEMPLATE_FILE = os.getenv("TEMPLATE_FILE", "bug-update-template.json")
SCREENSHOTS_DIR = os.getenv("SCREENSHOTS_DIR", "screenshots")

# Dashboard server
DASHBOARD_HOST = os.getenv("DASHBOARD_HOST", "127.0.0.1")
DASHBOARD_PORT = int(os.getenv("DASHBOARD_PORT", 8000))
DASHBOARD_DATA_URL = os.getenv(
    "DASHBOARD_DATA_URL",
    f"http://{DASHBOARD_HOST}:{DASHBOARD_PORT}/bugs-data.json",
)

# Refresh loop
DASHBOARD_REFRESH_SECONDS = float(os.getenv("DASHBOARD_REFRESH_SECONDS", 30))
DASHBOARD_FETCH_TIMEOUT = float(os.getenv("DASHBOARD_FETCH_TIMEOUT", 10))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR", "logs")
