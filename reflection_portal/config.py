"""Reflection Portal configuration — loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

REPO_ROOT = Path(__file__).resolve().parent.parent

# Jinja2 templates for the web UI
WEB_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
STATIC_DIR = Path(__file__).resolve().parent / "static"

# Supabase
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_SERVICE_KEY = os.environ.get("SUPABASE_SERVICE_KEY", "")

# Anthropic (document extraction)
ANTHROPIC_API_KEY = os.environ.get("ANTHROPIC_API_KEY", "")
EXTRACTION_MODEL = os.environ.get("EXTRACTION_MODEL", "claude-sonnet-4-20250514")
EXTRACTION_MAX_TOKENS = int(os.environ.get("EXTRACTION_MAX_TOKENS", "4096"))

# First calendar year of the academic year being reflected on (March -> February)
ACADEMIC_YEAR_START = int(os.environ.get("ACADEMIC_YEAR_START", "2025"))

# Session cookie signing
DEFAULT_SESSION_SECRET = "dev-session-secret"
SESSION_SECRET = os.environ.get("SESSION_SECRET", DEFAULT_SESSION_SECRET)

# Staff survey tab
SURVEY_URL = os.environ.get("SURVEY_URL", "https://ksurv.kr/aUM-Pj84PA")
SCHOOL_NAME = os.environ.get("SCHOOL_NAME", "Byeokbang Elementary School")

# Curriculum chart partial refresh interval (HTMX polling)
CHART_POLL_SECONDS = int(os.environ.get("CHART_POLL_SECONDS", "5"))

# Server
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))
