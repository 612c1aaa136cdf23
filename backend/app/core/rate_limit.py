# app/core/rate_limit.py

from slowapi import Limiter
from slowapi.util import get_remote_address

# Keyed on client address; in-memory storage, so the window is per process
limiter = Limiter(key_func=get_remote_address)
