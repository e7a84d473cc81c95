import os
import tempfile

# env.py refuses to load without a database url; the app never talks to it in tests
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "slips_api_test.log"))
os.environ.setdefault("STACK_STORAGE_PATH", os.path.join(tempfile.gettempdir(), "slips_storage_test.json"))
os.environ.setdefault("SEARCH_DEBOUNCE_MS", "50")
