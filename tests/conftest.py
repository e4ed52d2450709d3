import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Keep API tests deterministic: no rate limiting, no real credentials.
os.environ["RATE_LIMIT_ENABLED"] = "0"
for _name in ("GEMINI_API_KEY", "FIREBASE_API_KEY", "FIREBASE_PROJECT_ID", "SENTRY_DSN"):
    os.environ.pop(_name, None)
    os.environ.pop(f"VITE_{_name}", None)
