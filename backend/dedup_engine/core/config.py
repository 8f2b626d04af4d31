import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables (only in development)
# In containers, environment variables are set directly
if os.getenv("ENVIRONMENT") != "production":
    load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Database configuration
DATABASE_TYPE = os.getenv("DATABASE_TYPE", "memory")  # Options: 'memory', 'json'

# JSON database configuration
JSON_DB_PATH = os.getenv("JSON_DB_PATH")  # Path to JSON database directory

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() == "true"

# Classification thresholds (must be ordered unlikely < possible < likely < certain)
DEDUP_CERTAIN_THRESHOLD = float(os.getenv("DEDUP_CERTAIN_THRESHOLD", "0.95"))
DEDUP_LIKELY_THRESHOLD = float(os.getenv("DEDUP_LIKELY_THRESHOLD", "0.85"))
DEDUP_POSSIBLE_THRESHOLD = float(os.getenv("DEDUP_POSSIBLE_THRESHOLD", "0.70"))
DEDUP_UNLIKELY_THRESHOLD = float(os.getenv("DEDUP_UNLIKELY_THRESHOLD", "0.50"))

# Fuzzy candidate search
DEDUP_CANDIDATE_LIMIT = int(os.getenv("DEDUP_CANDIDATE_LIMIT", "10"))

# Scoring tolerances
DEDUP_DATE_WINDOW_DAYS = int(os.getenv("DEDUP_DATE_WINDOW_DAYS", "30"))
DEDUP_AMOUNT_TOLERANCE = os.getenv("DEDUP_AMOUNT_TOLERANCE", "0.01")  # absolute, currency units
DEDUP_AMOUNT_RELATIVE_TOLERANCE = os.getenv("DEDUP_AMOUNT_RELATIVE_TOLERANCE", "0.05")

# Invoice defaults
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "GBP").strip().upper()
