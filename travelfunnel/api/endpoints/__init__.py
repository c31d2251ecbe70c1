from .checkout import checkout_api
from .quotes import quotes_api

__all__ = ["checkout_api", "quotes_api"]
