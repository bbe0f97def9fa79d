import os

# --------------------------------------------------------------------
# Utility
# --------------------------------------------------------------------
def _bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")

# --------------------------------------------------------------------
# Feeds
# --------------------------------------------------------------------
FEEDS_FILE = os.getenv("FEEDS_FILE", "feeds.yaml")

# --------------------------------------------------------------------
# Polling
# --------------------------------------------------------------------
POLL_SECONDS = float(os.getenv("POLL_SECONDS", "300"))
INITIAL_DELAY_SECONDS = float(os.getenv("INITIAL_DELAY_SECONDS", "10"))

# --------------------------------------------------------------------
# Fetch
# --------------------------------------------------------------------
CONNECT_TIMEOUT = float(os.getenv("CONNECT_TIMEOUT", "10"))
READ_TIMEOUT = float(os.getenv("READ_TIMEOUT", "30"))
BROWSER_UA = os.getenv("HTTP_UA", (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0.0.0 Safari/537.36"
))

# --------------------------------------------------------------------
# Output
# --------------------------------------------------------------------
EVENTS_TO_STDOUT = _bool("EVENTS_TO_STDOUT", "true")
# Pending new_item events; pollers block once this many are waiting (0 = unbounded)
QUEUE_MAXSIZE = int(os.getenv("QUEUE_MAXSIZE", "100"))
