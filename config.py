"""Configuration values for the appointment sync tools."""

import os
from dotenv import load_dotenv

BASE_DIR = os.path.dirname(os.path.abspath(__file__))  # repo root where config.py lives
ENV_PATH = os.path.join(BASE_DIR, ".env")
if os.path.exists(ENV_PATH):
    load_dotenv(dotenv_path=ENV_PATH, override=True)
else:
    load_dotenv(override=True)  # fallback to process/working-dir envs

# --- Google Sheets access ---
# API key works for reads on shared sheets; writes need a service account.
GOOGLE_SHEETS_API_KEY = os.environ.get("GOOGLE_SHEETS_API_KEY", "")
SERVICE_ACCOUNT_FILE = os.environ.get("SERVICE_ACCOUNT_FILE", "credentials.json")
SHEETS_API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"
HTTP_TIMEOUT = float(os.environ.get("HTTP_TIMEOUT", "20"))

# --- Spreadsheets (id or full URL) ---
MAIN_APPOINTMENTS_SHEET_ID = os.environ.get("MAIN_APPOINTMENTS_SHEET_ID", "")
USERS_SHEET_ID = os.environ.get("USERS_SHEET_ID", "")

# --- Tabs ---
APPOINTMENTS_TAB = os.environ.get("APPOINTMENTS_TAB", "Sheet1")
USERS_TAB = os.environ.get("USERS_TAB", "Sheet1")
USER_SHEET_TAB = os.environ.get("USER_SHEET_TAB", "Sheet1")

# --- Sync loop ---
SYNC_INTERVAL_SECONDS = float(os.environ.get("SYNC_INTERVAL_SECONDS", "30"))
STATE_FILE = os.environ.get("STATE_FILE", os.path.join(BASE_DIR, ".apptsync_state.json"))

# --- Debugging ---
DEBUG_LOG = os.getenv("DEBUG_LOG", "0").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")  # INFO|DEBUG
