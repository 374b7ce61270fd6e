# partnerhub/core/rate_limit.py
# Shared slowapi limiter; limits are applied per-route
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
