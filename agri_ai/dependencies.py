from slowapi import Limiter
from slowapi.util import get_remote_address


# Shared rate limiter, attached to the app in main.py
limiter = Limiter(key_func=get_remote_address)
