from __future__ import annotations

import os

# Settings are read at import time, so pin them before the app is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("TIMEZONE", "UTC")
