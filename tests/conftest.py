import os
import tempfile

# Settings are read at import time; keep test runs off the real data dir
os.environ.setdefault("RATE_LIMIT_MAX", "100000")
os.environ.setdefault("PREFERENCES_PATH", os.path.join(tempfile.mkdtemp(prefix="apna-thela-"), "preferences.json"))
