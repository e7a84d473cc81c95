import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


# Environment variables for Slips API
PORT = int(os.getenv("PORT", 8000))

# pg db url (hosted catalog)
DATABASE_URL = os.getenv("DATABASE_URL", None)

# search settings
SEARCH_DEFAULT_LIMIT = int(os.getenv("SEARCH_DEFAULT_LIMIT", 20))
# shortest term that is sent to the catalog
SEARCH_MIN_LENGTH = int(os.getenv("SEARCH_MIN_LENGTH", 3))
# Delay in milliseconds before a typed query is sent
SEARCH_DEBOUNCE_MS = int(os.getenv("SEARCH_DEBOUNCE_MS", 300))
RECENT_SEARCHES_LIMIT = int(os.getenv("RECENT_SEARCHES_LIMIT", 5))

# barcode settings
UPC_MIN_LENGTH = int(os.getenv("UPC_MIN_LENGTH", 8))
UPC_MAX_LENGTH = int(os.getenv("UPC_MAX_LENGTH", 14))

# home screen
SUGGESTIONS_PER_SECTION = int(os.getenv("SUGGESTIONS_PER_SECTION", 3))

# local storage for the stack and recent searches
STACK_STORAGE_PATH = os.getenv("STACK_STORAGE_PATH", "slips_storage.json")

LOG_FILE = os.getenv("LOG_FILE", "slips_api.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()
LOG_CONSOLE_LEVEL = os.getenv("LOG_CONSOLE_LEVEL", "ERROR").upper()
TIMEZONE = os.getenv("TIMEZONE", "UTC")

# Define Required Environment Variables and show error if not set
required_env_vars = {
    "DATABASE_URL": DATABASE_URL,
}

# Check if all required environment variables are set
for var in required_env_vars.keys():
    if required_env_vars[var] is None:
        raise ValueError(f"Environment variable {var} is not set. Please set it in the .env file.")
