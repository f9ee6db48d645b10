import os

from slowapi import Limiter
from slowapi.util import get_remote_address

RECEIPT_RATE_LIMIT = os.getenv("RECEIPT_RATE_LIMIT", "20/minute")

limiter = Limiter(
    key_func=get_remote_address,
    enabled=os.getenv("RATE_LIMIT_ENABLED", "1").lower() in {"1", "true", "yes"},
)
