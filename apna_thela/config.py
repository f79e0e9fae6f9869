import os
from pathlib import Path

from dotenv import load_dotenv


load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
WEB_DIR = BASE_DIR / "web"

STATIC_CACHE_NAME = os.getenv("STATIC_CACHE_NAME", "apna-thela-v1.2.0")
DATA_CACHE_NAME = os.getenv("DATA_CACHE_NAME", "apna-thela-data-v1.0.0")
UPSTREAM_URL = os.getenv("UPSTREAM_URL", "http://127.0.0.1:8000")

PREFERENCES_PATH = Path(os.getenv("PREFERENCES_PATH", str(DATA_DIR / "preferences.json")))

RATE_LIMIT_MAX = int(os.getenv("RATE_LIMIT_MAX", "60"))
RATE_LIMIT_WINDOW = int(os.getenv("RATE_LIMIT_WINDOW", "60"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
