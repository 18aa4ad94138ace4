"""
Core constants and limits.

Defines system-wide constants for the ledger, the quote source and storage.
"""

# Ledger
SHARE_TOLERANCE = 1e-9  # Float slack when comparing share counts

# Quote Source (Alpha Vantage free tier)
ALPHA_VANTAGE_BASE_URL = "https://www.alphavantage.co/query"
QUOTE_BATCH_SIZE = 5  # Symbols fetched concurrently per batch
QUOTE_BATCH_DELAY_SECONDS = 2.0  # Pause between batches
QUOTE_CACHE_TTL_SECONDS = 10.0  # Per-symbol price cache lifetime
QUOTE_CACHE_MAX_SYMBOLS = 256
REQUEST_TIMEOUT_SECONDS = 10.0

# Persistence
DEFAULT_STORAGE_KEY = "portfolio_data"
DEFAULT_STORAGE_DIR = ".stockfolio"
SNAPSHOT_FORMAT_VERSION = 1
