"""Shared slowapi limiter.

Routes decorate with ``limiter.limit(...)`` and ``main`` registers the same
instance on ``app.state`` so the 429 handler can find it.
"""
import os

from slowapi import Limiter
from slowapi.util import get_remote_address

# No rate limiting under test
limiter = Limiter(key_func=get_remote_address, enabled=os.getenv("ENVIRONMENT") != "test")
