import os
import sys

from dotenv import load_dotenv

# Load .env but don't override existing environment variables
# This allows test scripts to set values before import
load_dotenv(".env", override=False)


def _exit_with_config_error(name: str, reason: str, expected: str) -> None:
    print(f"\n ERROR: Invalid {name} configuration\n", file=sys.stderr)
    print(f"Reason: {reason}", file=sys.stderr)
    print(f"Expected: {expected}", file=sys.stderr)
    print(f"Current value: {os.environ.get(name, '(not set)')}\n", file=sys.stderr)
    sys.exit(1)


# Pricing tables
SHIPPING_COUNTRY = os.environ.get("SHIPPING_COUNTRY", "us")      # shipping_types/{country}.json, tax_rates/{country}.json
DISCOUNT_TABLE = os.environ.get("DISCOUNT_TABLE", "default")      # discount_codes/{name}.json

# Durable storage
CART_STORAGE_BACKEND = os.environ.get("CART_STORAGE_BACKEND", "redis").lower()
if CART_STORAGE_BACKEND not in ("redis", "sql"):
    _exit_with_config_error("CART_STORAGE_BACKEND", f"unknown backend '{CART_STORAGE_BACKEND}'", "redis or sql")

CART_KEY_PREFIX = os.environ.get("CART_KEY_PREFIX", "storefront:")
REDIS_HOST = os.environ.get("REDIS_HOST", "localhost")
REDIS_PASSWORD = os.environ.get("REDIS_PASSWORD") or None
DB_URL = os.environ.get("DB_URL", "sqlite+aiosqlite:///data/carts.db")

try:
    REDIS_PORT = int(os.environ.get("REDIS_PORT", "6379"))
    REDIS_DB = int(os.environ.get("REDIS_DB", "0"))
except ValueError as e:
    _exit_with_config_error("REDIS_PORT", str(e), "Integer port and database number (e.g., 6379 and 0)")

try:
    _ttl_str = os.environ.get("CART_TTL_SECONDS")
    CART_TTL_SECONDS = int(_ttl_str) if _ttl_str else None  # None = carts never expire
    if CART_TTL_SECONDS is not None and CART_TTL_SECONDS <= 0:
        raise ValueError(f"CART_TTL_SECONDS must be positive (got: {CART_TTL_SECONDS})")
except ValueError as e:
    _exit_with_config_error("CART_TTL_SECONDS", str(e), "Positive integer number of seconds")

# Parse PERSISTENCE_TIMEOUT_SECONDS with error handling
try:
    PERSISTENCE_TIMEOUT_SECONDS = float(os.environ.get("PERSISTENCE_TIMEOUT_SECONDS", "2.0"))
    if PERSISTENCE_TIMEOUT_SECONDS <= 0:
        raise ValueError(f"PERSISTENCE_TIMEOUT_SECONDS must be positive (got: {PERSISTENCE_TIMEOUT_SECONDS})")
except ValueError as e:
    _exit_with_config_error("PERSISTENCE_TIMEOUT_SECONDS", str(e), "Positive number of seconds (e.g., 0.5, 2)")

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_RETENTION_DAYS = int(os.environ.get("LOG_RETENTION_DAYS", "7"))
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true") == "true"  # Default: enabled
LOG_DIR = os.environ.get("LOG_DIR", "logs")
