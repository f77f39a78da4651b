from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent
ROOT_DIR = BASE_DIR.parent

MAX_BLOCKS_PER_REQUEST = 50
DEFAULT_BLOCKS_PER_REQUEST = 10

# Cursor values arrive as uint64; stored timestamps are signed BIGINT.
MAX_START_TIMESTAMP_NANOSEC = 2**64 - 1
MAX_STORED_TIMESTAMP_NANOSEC = 2**63 - 1

DEFAULT_DATABASE_URL = f"sqlite:///{ROOT_DIR / 'chain_events.db'}"
DEFAULT_BIND_ADDRESS = "0.0.0.0:8080"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

__all__ = [
    "BASE_DIR",
    "ROOT_DIR",
    "MAX_BLOCKS_PER_REQUEST",
    "DEFAULT_BLOCKS_PER_REQUEST",
    "MAX_START_TIMESTAMP_NANOSEC",
    "MAX_STORED_TIMESTAMP_NANOSEC",
    "DEFAULT_DATABASE_URL",
    "DEFAULT_BIND_ADDRESS",
    "LOG_DATE_FORMAT",
]
